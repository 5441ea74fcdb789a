from __future__ import annotations

from typing import Sequence

from taste_matcher.models import UNIT_FEATURE_NAMES, AudioFeatures, ScoredMatch, TasteProfile, Track

# Nominal BPM range used to bring tempo onto the same scale as the unit
# features. Tempos outside it are not clamped.
TEMPO_MIN_BPM = 40.0
TEMPO_MAX_BPM = 200.0


def normalize_tempo(bpm: float) -> float:
    return (bpm - TEMPO_MIN_BPM) / (TEMPO_MAX_BPM - TEMPO_MIN_BPM)


def score_track(profile: TasteProfile, features: AudioFeatures) -> float:
    """L1 distance between a track's features and the profile mean; lower is closer."""
    mean = profile.mean
    distance = sum(abs(getattr(features, name) - getattr(mean, name)) for name in UNIT_FEATURE_NAMES)
    return distance + abs(normalize_tempo(features.tempo) - normalize_tempo(mean.tempo))


def _diversify(ranked: list[ScoredMatch]) -> list[ScoredMatch]:
    seen: set[str] = set()
    picked: list[ScoredMatch] = []
    for match in ranked:
        artist = match.track.primary_artist
        if artist in seen:
            continue
        seen.add(artist)
        picked.append(match)
    return picked


def match_tracks(
    profile: TasteProfile,
    candidates: Sequence[Track],
    limit: int | None = None,
) -> list[ScoredMatch]:
    """Rank candidates by closeness to the profile, one track per primary artist.

    Candidates without audio features are left out. Equal scores keep their
    input order. Because the artist filter walks the globally sorted list,
    each artist is represented by its best-scoring track.
    """

    if limit is not None and limit < 0:
        raise ValueError(f"limit must be non-negative, got {limit}")

    scored = [
        ScoredMatch(track=track, score=score_track(profile, track.audio_features))
        for track in candidates
        if track.audio_features is not None
    ]
    scored.sort(key=lambda match: match.score)

    matches = _diversify(scored)
    return matches if limit is None else matches[:limit]
