"""Pydantic configuration schema for CLI YAML input."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator


class ClientConfig(BaseModel):
    """HTTP settings shared by every stream a controller opens."""

    base_url: str = ""
    method: str = "POST"
    headers: dict[str, str] = Field(default_factory=dict)
    timeout: float | None = None
    follow_redirects: bool = True

    model_config = ConfigDict(extra="forbid")

    @field_validator("method")
    @classmethod
    def _upper_method(cls, value: str) -> str:
        return value.upper()

    @field_validator("timeout")
    @classmethod
    def _positive_timeout(cls, value: float | None) -> float | None:
        if value is not None and value <= 0:
            raise ValueError("timeout must be positive or null")
        return value


class TranscriptConfig(BaseModel):
    path: Path | None = None

    model_config = ConfigDict(extra="forbid")


class AppConfig(BaseModel):
    client: ClientConfig = Field(default_factory=ClientConfig)
    transcript: TranscriptConfig = Field(default_factory=TranscriptConfig)

    def to_settings(self) -> dict[str, Any]:
        settings: dict[str, Any] = {}
        client_settings = self.client.model_dump(exclude_defaults=True)
        if client_settings:
            settings["client"] = client_settings
        if self.transcript.path is not None:
            settings["transcript"] = {"path": self.transcript.path}
        return settings


def load_config(raw: Any) -> AppConfig:
    if not isinstance(raw, dict):
        raise ValidationError.from_exception_data(
            "AppConfig",
            [{"type": "dict_type", "loc": ("config",), "input": raw}],
        )
    return AppConfig.model_validate(raw)
