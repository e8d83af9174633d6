import logging

import pytest

from drafty.internal_core.config import DraftyConfig, configure_logging, load_config


def test_load_config_defaults(monkeypatch) -> None:
    for name in ("DRAFTY_PREVIEW_MAX_LENGTH", "DRAFTY_LOG_LEVEL", "DRAFTY_MAX_SPANS", "DRAFTY_MAX_ENTITIES"):
        monkeypatch.delenv(name, raising=False)

    config = load_config()

    assert config == DraftyConfig(
        DRAFTY_PREVIEW_MAX_LENGTH=64,
        DRAFTY_LOG_LEVEL="INFO",
        DRAFTY_MAX_SPANS=1024,
        DRAFTY_MAX_ENTITIES=256,
    )


def test_load_config_reads_environment(monkeypatch) -> None:
    monkeypatch.setenv("DRAFTY_PREVIEW_MAX_LENGTH", "15")
    monkeypatch.setenv("DRAFTY_LOG_LEVEL", "debug")
    monkeypatch.setenv("DRAFTY_MAX_SPANS", "8")
    monkeypatch.setenv("DRAFTY_MAX_ENTITIES", "")

    config = load_config()

    assert config.DRAFTY_PREVIEW_MAX_LENGTH == 15
    assert config.DRAFTY_LOG_LEVEL == "DEBUG"
    assert config.DRAFTY_MAX_SPANS == 8
    assert config.DRAFTY_MAX_ENTITIES == 256


def test_load_config_rejects_negative_preview_length(monkeypatch) -> None:
    monkeypatch.setenv("DRAFTY_PREVIEW_MAX_LENGTH", "-1")
    with pytest.raises(ValueError):
        load_config()


def test_configure_logging_falls_back_to_info_for_unknown_level() -> None:
    configure_logging(
        DraftyConfig(
            DRAFTY_PREVIEW_MAX_LENGTH=64,
            DRAFTY_LOG_LEVEL="CHATTY",
            DRAFTY_MAX_SPANS=1,
            DRAFTY_MAX_ENTITIES=1,
        )
    )
    assert logging.getLogger("drafty").level == logging.INFO
