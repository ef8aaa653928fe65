"""
Application Layer

Contains the voting engine and the ports it talks through.

Structure:
- interfaces/: Port interfaces for the queue, chat, config and clock
- services/: The voting engine, gong fanfare and their DTOs
"""
