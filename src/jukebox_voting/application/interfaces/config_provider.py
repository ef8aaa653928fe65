"""Port interface for the runtime-mutable voting limits."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Any


class ConfigProvider(ABC):
    """Source of quorum limits and per-user caps.

    The voting engine calls ``get`` on every quorum check and never caches
    the answer inside a topic.
    """

    @abstractmethod
    def get(self, key: str) -> int | None:
        """Current value for ``key``, or None when it is not configured."""
        ...

    @abstractmethod
    def update(self, values: Mapping[str, Any]) -> dict[str, tuple[Any, Any]]:
        """Apply a partial update.

        Returns:
            ``{key: (old, new)}`` for every key whose value changed.

        Raises:
            ValidationError: If a key is unknown or a value is out of range.
                Nothing is applied in that case.
        """
        ...

    @abstractmethod
    def snapshot(self) -> dict[str, int]:
        """All current values keyed by their snake_case name."""
        ...
