from __future__ import annotations

import pytest

from convergent.config import ConfigurationError, WaitConfig, get_wait_config


def test_get_wait_config_defaults() -> None:
    config = get_wait_config()

    assert config == WaitConfig()
    assert config.timeout_seconds is None


def test_get_wait_config_reads_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("CONVERGENT_POLL_INTERVAL", "2")
    monkeypatch.setenv("CONVERGENT_MAX_POLL_INTERVAL", "10")
    monkeypatch.setenv("CONVERGENT_POLL_BACKOFF", "3")
    monkeypatch.setenv("CONVERGENT_WAIT_TIMEOUT", "90")

    config = get_wait_config()

    assert config.poll_interval == 2.0
    assert config.max_poll_interval == 10.0
    assert config.backoff == 3.0
    assert config.timeout_seconds == 90.0


def test_get_wait_config_rejects_cap_below_interval(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("CONVERGENT_POLL_INTERVAL", "20")
    monkeypatch.setenv("CONVERGENT_MAX_POLL_INTERVAL", "10")

    with pytest.raises(ConfigurationError, match="max_poll_interval"):
        get_wait_config()


def test_wait_config_rejects_shrinking_backoff() -> None:
    with pytest.raises(ConfigurationError, match="backoff"):
        WaitConfig(backoff=0.5)
