from __future__ import annotations

import dataclasses
import math
from collections import Counter
from functools import reduce
from typing import Iterable, Sequence

from taste_matcher.models import FEATURE_NAMES, AudioFeatures, TasteProfile, Track
from taste_matcher.payloads import AudioFeaturesPayload, TrackPayload


class NoFeatureDataError(ValueError):
    """Raised when none of the given tracks carries audio features."""


def _to_audio_features(payload: AudioFeaturesPayload) -> AudioFeatures:
    return AudioFeatures(**{name: float(getattr(payload, name)) for name in FEATURE_NAMES})


def build_track(payload: TrackPayload) -> Track:
    images = payload.album.images if payload.album else []
    return Track(
        track_id=payload.id,
        track_name=payload.name,
        artist_names=[a.name for a in payload.artists],
        image_url=images[0].url if images else None,
        audio_features=_to_audio_features(payload.audio_features) if payload.audio_features else None,
    )


def attach_audio_features(
    tracks: Sequence[Track],
    audio_features: Sequence[AudioFeaturesPayload | None],
) -> list[Track]:
    """Return copies of ``tracks`` with separately fetched features merged in.

    Entries are matched to tracks by ``id``; entries without an id pair with
    the track at the same position, as in a batched audio-features response.
    ``None`` entries leave the track unchanged.
    """

    by_id: dict[str, AudioFeatures] = {}
    by_position: dict[int, AudioFeatures] = {}
    for index, payload in enumerate(audio_features):
        if payload is None:
            continue
        if payload.id is not None:
            by_id[payload.id] = _to_audio_features(payload)
        else:
            by_position[index] = _to_audio_features(payload)

    merged: list[Track] = []
    for index, track in enumerate(tracks):
        features = by_id.get(track.track_id, by_position.get(index, track.audio_features))
        merged.append(dataclasses.replace(track, artist_names=list(track.artist_names), audio_features=features))
    return merged


def _add(totals: tuple[float, ...], values: tuple[float, ...]) -> tuple[float, ...]:
    return tuple(total + value for total, value in zip(totals, values))


def compute_taste_profile(tracks: Sequence[Track]) -> TasteProfile:
    """Compute the per-feature mean and population standard deviation.

    Only tracks with audio features take part; the others are skipped, not
    counted as zeros. Raises ``NoFeatureDataError`` when no track has
    features, including for an empty sequence.
    """

    vectors = [
        tuple(getattr(t.audio_features, name) for name in FEATURE_NAMES)
        for t in tracks
        if t.audio_features is not None
    ]
    count = len(vectors)
    if count == 0:
        raise NoFeatureDataError(
            f"None of the {len(tracks)} tracks has audio features; cannot compute a taste profile."
        )

    zeros = (0.0,) * len(FEATURE_NAMES)
    means = tuple(total / count for total in reduce(_add, vectors, zeros))

    squared = (tuple((v - m) ** 2 for v, m in zip(vector, means)) for vector in vectors)
    stddevs = tuple(math.sqrt(total / count) for total in reduce(_add, squared, zeros))

    return TasteProfile(mean=AudioFeatures(*means), stddev=AudioFeatures(*stddevs), track_count=count)


def top_artists(tracks: Iterable[Track], min_count: int = 3, limit: int = 5) -> list[str]:
    """Artists credited on at least ``min_count`` tracks, most frequent first."""

    # Counter keeps first-seen order and the sort is stable, so ties stay in
    # order of first appearance.
    counts = Counter(name for track in tracks for name in track.artist_names)
    frequent = sorted(
        (item for item in counts.items() if item[1] >= min_count),
        key=lambda item: item[1],
        reverse=True,
    )
    return [name for name, _ in frequent[: max(limit, 0)]]
