"""Dependency injection container for the stream client."""

from __future__ import annotations

from pathlib import Path

from dependency_injector import containers, providers

from .client import StreamController
from .schemas import ClientConfig
from .transcript import TranscriptLogger


class StreamContainer(containers.DeclarativeContainer):
    """Dependency-injector container definition."""

    client_settings = providers.Singleton(ClientConfig)

    # Replaced with an httpx.MockTransport in tests; None selects the network.
    http_transport = providers.Object(None)

    transcript = providers.Object(None)

    controller = providers.Factory(
        StreamController,
        settings=client_settings,
        transport=http_transport,
        transcript=transcript,
    )


def create_container(*, settings: dict | None = None) -> StreamContainer:
    """Instantiate container with optional overrides."""

    container = StreamContainer()

    if not settings:
        return container

    client_settings = settings.get("client", {}) if isinstance(settings, dict) else {}
    if client_settings:
        container.client_settings.override(providers.Object(ClientConfig(**client_settings)))

    transcript_settings = settings.get("transcript", {}) if isinstance(settings, dict) else {}
    if transcript_settings.get("path"):
        container.transcript.override(
            providers.Singleton(TranscriptLogger, Path(transcript_settings["path"]))
        )

    return container
