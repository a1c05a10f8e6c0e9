from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from interviewstream.config import ConfigManager, load_config_file
from interviewstream.container import create_container
from interviewstream.schemas.config import AppConfig, load_config
from interviewstream.transcript import TranscriptLogger


def test_create_container_with_overrides(tmp_path: Path):
    container = create_container(
        settings={
            "client": {
                "base_url": "https://app.example.com",
                "method": "post",
                "headers": {"Authorization": "Bearer token"},
                "timeout": 30,
            },
            "transcript": {"path": tmp_path / "stream.jsonl"},
        }
    )

    controller = container.controller()

    assert controller.settings.base_url == "https://app.example.com"
    assert controller.settings.method == "POST"
    assert controller.settings.headers == {"Authorization": "Bearer token"}
    assert controller.settings.timeout == 30
    assert isinstance(controller._transcript, TranscriptLogger)
    assert controller._transcript.path == tmp_path / "stream.jsonl"


def test_create_container_defaults_keep_no_timeout():
    controller = create_container().controller()

    assert controller.settings.method == "POST"
    assert controller.settings.timeout is None
    assert controller._transcript is None


def test_load_config_validation():
    data = {
        "client": {"base_url": "https://app.example.com", "timeout": 12.5},
        "transcript": {"path": "logs/stream.jsonl"},
    }
    app_config = load_config(data)
    assert isinstance(app_config, AppConfig)
    settings = app_config.to_settings()
    assert settings["client"] == {"base_url": "https://app.example.com", "timeout": 12.5}
    assert settings["transcript"]["path"] == Path("logs/stream.jsonl")


def test_load_config_rejects_bad_values():
    with pytest.raises(ValidationError):
        load_config(["not", "a", "mapping"])
    with pytest.raises(ValidationError):
        load_config({"client": {"timeout": 0}})
    with pytest.raises(ValidationError):
        load_config({"client": {"retries": 3}})


def test_config_manager_loads_named_profile(tmp_path: Path):
    (tmp_path / "staging.yaml").write_text(
        "client:\n  base_url: https://staging.example.com\n  headers:\n    X-Env: staging\n",
        encoding="utf-8",
    )
    (tmp_path / "empty.yaml").write_text("", encoding="utf-8")

    staging = ConfigManager(tmp_path).load("staging")
    empty = load_config_file(tmp_path / "empty.yaml")

    assert staging.client.base_url == "https://staging.example.com"
    assert staging.client.headers == {"X-Env": "staging"}
    assert empty.to_settings() == {}
