"""Validation of music-API JSON documents before they reach the matcher."""
from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, ValidationError


class PayloadError(ValueError):
    """Raised when an input document cannot be read as tracks or features."""


class _Payload(BaseModel):
    model_config = ConfigDict(extra="ignore", allow_inf_nan=False)


class ArtistPayload(_Payload):
    name: str


class ImagePayload(_Payload):
    url: str


class AlbumPayload(_Payload):
    images: list[ImagePayload] = []


class AudioFeaturesPayload(_Payload):
    """Audio features object; ``id`` is only present on the standalone endpoint."""
    id: str | None = None
    acousticness: float
    danceability: float
    energy: float
    instrumentalness: float
    valence: float
    tempo: float


class TrackPayload(_Payload):
    id: str
    name: str
    artists: list[ArtistPayload] = []
    album: AlbumPayload | None = None
    audio_features: AudioFeaturesPayload | None = None


def _items(document: Any) -> list[Any]:
    if isinstance(document, dict) and "items" in document:
        document = document["items"]
    if isinstance(document, dict) and "audio_features" in document:
        document = document["audio_features"]
    if not isinstance(document, list):
        raise PayloadError("Expected a JSON list or an object with an 'items' list.")
    return document


def unwrap_track_items(document: Any) -> list[dict]:
    """Return the track objects of a document.

    Playlist items wrap each track as ``{"track": {...}}``; the wrapper is
    removed. Track objects carry their own boolean ``track`` flag, which is
    not a wrapper. Removed tracks (null) and local files (no id) are dropped.
    """

    tracks: list[dict] = []
    for item in _items(document):
        wrapped = item.get("track", False) if isinstance(item, dict) else False
        if wrapped is None or isinstance(wrapped, dict):
            item = wrapped
        if item is None:
            continue
        if isinstance(item, dict) and (item.get("is_local") or item.get("id", "") is None):
            continue
        tracks.append(item)
    return tracks


def _read_json(path: str | Path) -> Any:
    try:
        return json.loads(Path(path).read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise PayloadError(f"{path}: invalid JSON ({exc.msg} at line {exc.lineno})") from exc
    except UnicodeDecodeError as exc:
        raise PayloadError(f"{path}: not valid UTF-8 ({exc.reason} at byte {exc.start})") from exc


def load_track_payloads(path: str | Path) -> list[TrackPayload]:
    document = _read_json(path)
    try:
        return [TrackPayload.model_validate(item) for item in unwrap_track_items(document)]
    except ValidationError as exc:
        raise PayloadError(f"{path}: malformed track object\n{exc}") from exc
    except PayloadError as exc:
        raise PayloadError(f"{path}: {exc}") from exc


def load_audio_features_payloads(path: str | Path) -> list[AudioFeaturesPayload | None]:
    """Load a standalone audio-features list; null entries are kept as ``None``."""

    document = _read_json(path)
    try:
        return [
            None if item is None else AudioFeaturesPayload.model_validate(item)
            for item in _items(document)
        ]
    except ValidationError as exc:
        raise PayloadError(f"{path}: malformed audio features object\n{exc}") from exc
    except PayloadError as exc:
        raise PayloadError(f"{path}: {exc}") from exc
