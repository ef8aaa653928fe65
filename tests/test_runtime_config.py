"""Tests for SettingsConfigProvider, the in-memory source of live voting limits."""

import logging

import pytest

from jukebox_voting.config.runtime import SettingsConfigProvider, resolve_key
from jukebox_voting.config.settings import RUNTIME_LIMIT_KEYS, VotingSettings
from jukebox_voting.domain.shared.exceptions import ValidationError


@pytest.fixture
def provider():
    return SettingsConfigProvider(VotingSettings(gong_limit=3, flush_vote_limit=4))


class TestResolveKey:
    @pytest.mark.parametrize(
        "key,expected",
        [
            ("gong_limit", "gong_limit"),
            ("gongLimit", "gong_limit"),
            ("GONGLIMIT", "gong_limit"),
            (" voteTimeLimitMinutes ", "vote_time_limit_minutes"),
            ("flushVoteLimitPerUser", "flush_vote_limit_per_user"),
        ],
    )
    def test_known_keys(self, key, expected):
        assert resolve_key(key) == expected

    def test_cap_scopes_are_not_runtime_keys(self):
        assert resolve_key("gongCapScope") is None

    def test_unknown(self):
        assert resolve_key("loudness") is None


class TestSettingsConfigProvider:
    def test_defaults_without_settings(self):
        assert SettingsConfigProvider().get("flushVoteLimit") == 6

    def test_get(self, provider):
        assert provider.get("gongLimit") == 3
        assert provider.get("flush_vote_limit") == 4
        assert provider.get("loudness") is None

    def test_snapshot_has_every_runtime_key(self, provider):
        snapshot = provider.snapshot()
        assert tuple(snapshot) == RUNTIME_LIMIT_KEYS
        assert snapshot["gong_limit"] == 3

    def test_update_returns_changes(self, provider, caplog):
        with caplog.at_level(logging.INFO, logger="jukebox_voting"):
            changes = provider.update({"gongLimit": 5, "flush_vote_limit": 4})

        assert changes == {"gong_limit": (3, 5)}
        assert provider.get("gong_limit") == 5
        assert provider.settings.gong_limit == 5
        assert any("gong_limit" in r.getMessage() for r in caplog.records)

    def test_update_coerces_strings(self, provider):
        provider.update({"voteLimit": "7"})
        assert provider.get("vote_limit") == 7

    def test_unknown_key_rejected(self, provider):
        with pytest.raises(ValidationError) as exc_info:
            provider.update({"loudness": 11})

        assert exc_info.value.field == "loudness"
        assert "loudness" in exc_info.value.message

    def test_out_of_range_rejected_atomically(self, provider):
        with pytest.raises(ValidationError) as exc_info:
            provider.update({"gongLimit": 4, "voteTimeLimitMinutes": 120})

        assert "vote_time_limit_minutes" in exc_info.value.message
        assert provider.get("gong_limit") == 3
        assert provider.get("vote_time_limit_minutes") == 5

    def test_non_numeric_rejected(self, provider):
        with pytest.raises(ValidationError):
            provider.update({"gongLimit": "lots"})
