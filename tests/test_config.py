"""Tests for config loading: CLI overrides > env vars > defaults."""

from __future__ import annotations

from dataclasses import FrozenInstanceError

import pytest

from defectview.config import ViewerConfig, load_config


def test_defaults(monkeypatch):
    for key in ("DEFECTVIEW_SOURCE_URL", "DEFECTVIEW_LOG_LEVEL", "DEFECTVIEW_NORMAL_OPACITY"):
        monkeypatch.delenv(key, raising=False)
    cfg = load_config()
    assert cfg.source_url == ""
    assert cfg.normal_opacity == 0.4
    assert cfg.hover_opacity == 0.7
    assert cfg.log_level == "INFO"


def test_env_overrides_defaults(monkeypatch):
    monkeypatch.setenv("DEFECTVIEW_SOURCE_URL", "http://localhost:5000/")
    monkeypatch.setenv("DEFECTVIEW_NORMAL_OPACITY", "0.3")
    cfg = load_config()
    assert cfg.source_url == "http://localhost:5000"
    assert cfg.normal_opacity == 0.3


def test_args_override_env(monkeypatch):
    monkeypatch.setenv("DEFECTVIEW_LOG_LEVEL", "DEBUG")
    monkeypatch.setenv("DEFECTVIEW_SOURCE_URL", "http://env:1")
    cfg = load_config(log_level="WARNING", source_url="")
    assert cfg.log_level == "WARNING"
    assert cfg.source_url == ""


def test_config_is_frozen():
    cfg = ViewerConfig()
    with pytest.raises(FrozenInstanceError):
        cfg.log_level = "DEBUG"  # type: ignore[misc]
