"""In-memory ConfigProvider seeded from VotingSettings."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from pydantic import AliasChoices
from pydantic import ValidationError as PydanticValidationError

from ..application.interfaces.config_provider import ConfigProvider
from ..domain.shared.exceptions import ValidationError
from ..domain.shared.messages import ErrorMessages, LogTemplates
from .settings import RUNTIME_LIMIT_KEYS, VotingSettings

logger = logging.getLogger(__name__)


def _build_key_index() -> dict[str, str]:
    index: dict[str, str] = {}
    for name in RUNTIME_LIMIT_KEYS:
        index[name.lower()] = name
        alias = VotingSettings.model_fields[name].validation_alias
        if isinstance(alias, AliasChoices):
            for choice in alias.choices:
                if isinstance(choice, str):
                    index[choice.lower()] = name
    return index


_KEY_INDEX = _build_key_index()


def resolve_key(key: str) -> str | None:
    """Map a snake_case or camelCase key onto its runtime limit name."""
    return _KEY_INDEX.get(key.strip().lower())


class SettingsConfigProvider(ConfigProvider):
    """Holds the live voting limits for the process lifetime.

    Updates are validated against the same bounds as ``VotingSettings`` and
    applied all at once or not at all.
    """

    def __init__(self, settings: VotingSettings | None = None) -> None:
        self._current = settings or VotingSettings()

    @property
    def settings(self) -> VotingSettings:
        return self._current

    def get(self, key: str) -> int | None:
        name = resolve_key(key)
        if name is None:
            return None
        return getattr(self._current, name)

    def snapshot(self) -> dict[str, int]:
        return {name: getattr(self._current, name) for name in RUNTIME_LIMIT_KEYS}

    def update(self, values: Mapping[str, Any]) -> dict[str, tuple[Any, Any]]:
        normalized: dict[str, Any] = {}
        for key, value in values.items():
            name = resolve_key(str(key))
            if name is None:
                raise ValidationError(ErrorMessages.UNKNOWN_CONFIG_KEY.format(key=key), field=str(key))
            normalized[name] = value

        merged = {**self._current.model_dump(), **normalized}
        try:
            updated = VotingSettings.model_validate(merged)
        except PydanticValidationError as exc:
            error = exc.errors()[0]
            field = str(error["loc"][0]) if error.get("loc") else None
            reason = ErrorMessages.INVALID_CONFIG_VALUE.format(key=field, reason=error["msg"])
            logger.warning(LogTemplates.CONFIG_REJECTED, reason)
            raise ValidationError(reason, field=field) from exc

        changes: dict[str, tuple[Any, Any]] = {}
        for name in normalized:
            old, new = getattr(self._current, name), getattr(updated, name)
            if old != new:
                changes[name] = (old, new)
                logger.info(LogTemplates.CONFIG_UPDATED, name, old, new)

        self._current = updated
        return changes
