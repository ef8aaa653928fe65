"""Centralized message constants for error messages, log templates, and chat feedback."""

from __future__ import annotations


class ErrorMessages:
    """Error messages for exceptions and validation failures."""

    # Config Validation Errors
    UNKNOWN_CONFIG_KEY = "Unknown config key '{key}'"
    INVALID_CONFIG_VALUE = "Invalid value for '{key}': {reason}"
    INVALID_LOG_LEVEL = "Invalid log level: {level}. Must be one of {valid_levels}"

    # Wiring
    COLLABORATOR_REQUIRED = "{name} must be provided to build the voting engine"


class LogTemplates:
    """Log message templates for structured logging.

    Use these with logger.info(), logger.error(), etc. and pass values as parameters
    for proper log formatting and structured logging support.
    """

    # Engine Lifecycle
    ENGINE_INITIALIZED = "Voting engine initialized (gong=%s vote=%s immune=%s flush=%s)"
    ENGINE_CLOSED = "Voting engine closed"

    # Ballots
    BALLOT_RECORDED = "%s ballot by %s on %s: %s/%s"
    BALLOT_REJECTED = "%s ballot by %s rejected: %s"
    QUORUM_REACHED = "%s quorum reached on %s"

    # Gong
    GONG_TRACK_CHANGED = "Track changed from '%s' to '%s', resetting gong state"
    GONG_STATE_RESET = "Gong state reset"
    TRACK_BANNED = "Track '%s' is now immune"
    FANFARE_QUEUED = "Queued filler %s after the current track"
    FANFARE_FALLBACK = "Filler playback failed, falling back to a plain skip: %s"
    FANFARE_REMOVED = "Removed filler from queue slot %s"
    FANFARE_NOT_FOUND = "Filler not found in queue (may have already been removed)"
    FANFARE_REMOVE_FAILED = "Could not remove filler from queue: %s"

    # Slot tables
    SLOT_INVALIDATED = "Cleared %s votes for slot %s"
    TRACK_PROMOTED = "Moved '%s' from slot %s to slot %s"

    # Flush
    FLUSH_WINDOW_OPENED = "Flush voting window opened for %s minutes"
    FLUSH_WINDOW_EXPIRED = "Flush voting window expired without quorum"
    FLUSH_WINDOW_STALE = "Ignoring timeout for stale flush window %s"

    # Collaborators
    ACTUATOR_FAILED = "Queue action %s failed"
    SNAPSHOT_FAILED = "Could not read the queue while handling %s"
    MESSAGE_SEND_FAILED = "Failed to send message to %s: %s"
    ACTION_LOG_FAILED = "Failed to record action %s for %s: %s"
    CONFIG_READ_FAILED = "Config read for %s failed, using last known value %s"
    CONFIG_UPDATED = "Config %s changed from %s to %s"
    CONFIG_REJECTED = "Config update rejected: %s"

    # Scheduler
    SCHEDULED = "Scheduled %s in %.1fs"
    SCHEDULED_CALLBACK_FAILED = "Scheduled callback %s failed"

    # User actions
    USER_ACTION = "User action: %s -> %s"


class VoteMessages:
    """User-visible chat text. Templates use ``str.format`` keyword fields."""

    # Gong
    NOTHING_TO_GONG = "🤷 Nothing is currently playing to gong!"
    NOTHING_PLAYING = "🤷 Nothing is currently playing."
    GONG_IMMUNE = (
        "🔒 Sorry {user}, this track has diplomatic immunity! "
        "The people have voted to protect it from your gong. 🛡️"
    )
    GONG_CAP_REACHED = "🚫 Hold up, {user}! You've already gonged this track. One gong per person! 🔔"
    GONG_REGRETS = "💭 Having regrets, {user}? We're glad you came to your senses... Crisis averted! 😅"
    GONG_RECORDED = "{prefix} This is GONG {votes}/{needed} for *{title}*"
    GONG_TRIGGERED = "🔔💥 *THE PEOPLE HAVE SPOKEN!* This track has been GONGED into oblivion! ☠️"
    GONG_STATUS = "Currently {left} more votes are needed to GONG *{title}*"
    GONG_STATUS_IMMUNE = "This track is immune to GONG. The people have spoken..."
    GONG_SKIP_FAILED = "⚠️ The gong was decided, but I couldn't skip the track."

    # Promotion
    SLOT_NOT_FOUND = "🤷 That track number isn't in the queue. Use `list` to see available tracks! 📋"
    VOTE_ALREADY_VOTED = "🗳️ You already voted for this track, {user}! One vote per person! 🎯"
    VOTE_CAP_REACHED = "🚫 Easy there, {user}! You've used all {cap} of your votes. 🗳️"
    VOTE_RECORDED = "🗳️ This is VOTE *{votes}/{needed}* for *{title}* - Almost there! 🎵"
    VOTE_TRIGGERED = "⭐ *{title}* will play next!"
    VOTE_MOVE_FAILED = (
        "⚠️ Vote succeeded, but I couldn't move the track in the queue. "
        "(This usually happens if the current playback source isn't the queue.)"
    )
    VOTE_STATUS_EMPTY = "🤷 No tracks have been voted on yet. Be the first! Use `vote <track#>` 🎵"
    VOTE_STATUS_HEADER = "Current vote counts:"
    VOTE_STATUS_LINE = "Track #{slot}: {title} by {artist}: {votes}/{needed} votes"
    VOTE_STATUS_UNKNOWN_LINE = "Track #{slot} (no longer in queue): {votes}/{needed} votes"
    VOTE_STATUS_ERROR = "⚠️ Error checking vote status. Try again!"

    # Immunity
    IMMUNE_SLOT_NOT_FOUND = "🤔 Track not found in the queue. Check `list` to see what's playing! 📋"
    IMMUNE_CAP_REACHED = (
        "🚫 Stop right there, {user}! You've already voted for immunity. One vote per person! 🛡️"
    )
    IMMUNE_ALREADY_VOTED = "🗳️ You've already cast your immunity vote for this track, {user}! 🛡️"
    IMMUNE_RECORDED = (
        "🛡️ This is IMMUNITY VOTE *{votes}/{needed}* for *{title}* - Keep voting for immunity! 🛡️"
    )
    IMMUNE_TRIGGERED = (
        "🛡️ *IMMUNITY GRANTED!* *{title}* is now protected from the gong hammer! 🔨❌"
    )
    IMMUNE_STATUS = (
        "🛡️ Currently there are *{votes} votes* of *{needed}* needed to grant a song "
        "immunity from GONG! 🔔"
    )
    IMMUNE_LIST_EMPTY = "🤷 No tracks are currently immune. Everything is fair game for the gong! 🔔"
    IMMUNE_LIST_HEADER = "Immune Tracks:"

    # Flush
    FLUSH_ALREADY_VOTED = "🚫 Whoa there, {user}! You've already cast your flush vote. No cheating! 😏"
    FLUSH_WINDOW_OPENED = (
        "Voting period started for a flush of the queue... "
        "You have *{minutes} minutes* to gather *{needed} votes*!!"
    )
    FLUSH_RECORDED = "This is VOTE *{votes}*/{needed} for a full flush of the playlist!!"
    FLUSH_TRIGGERED = "🚽🚽🚽 *DEMOCRACY IN ACTION!* The votes have spoken - flushing the queue! 🚽🎵"
    FLUSH_FAILED = "⚠️ The flush vote passed, but I couldn't clear the queue."
    FLUSH_EXPIRED = (
        "⏰ Voting period for flush has ended. Votes reset! Start fresh if you want to flush. 🔄"
    )

    # Config
    CONFIG_UPDATED = "⚙️ Updated {changes}"
    CONFIG_UNCHANGED = "⚙️ Nothing to update."
    CONFIG_INVALID = "❌ {reason}"

    # Generic
    UNEXPECTED_ERROR = "⚠️ Something went wrong while counting that vote. Try again!"
    DEFAULT_GONG_PREFIX = "GONG!"
    DEFAULT_VOTE_PREFIX = "Voted!"
