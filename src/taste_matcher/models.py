from __future__ import annotations

from dataclasses import dataclass, field

FEATURE_NAMES = (
    "acousticness",
    "danceability",
    "energy",
    "instrumentalness",
    "valence",
    "tempo",
)

# Features already normalized to [0, 1] by the music API; tempo is raw BPM.
UNIT_FEATURE_NAMES = FEATURE_NAMES[:-1]


@dataclass(frozen=True, slots=True)
class AudioFeatures:
    acousticness: float
    danceability: float
    energy: float
    instrumentalness: float
    valence: float
    tempo: float

    def as_dict(self) -> dict[str, float]:
        return {name: getattr(self, name) for name in FEATURE_NAMES}


@dataclass(slots=True)
class Track:
    track_id: str
    track_name: str
    artist_names: list[str] = field(default_factory=list)
    image_url: str | None = None
    audio_features: AudioFeatures | None = None

    @property
    def primary_artist(self) -> str:
        return self.artist_names[0] if self.artist_names else ""

    @property
    def has_audio_features(self) -> bool:
        return self.audio_features is not None


@dataclass(frozen=True, slots=True)
class TasteProfile:
    mean: AudioFeatures
    stddev: AudioFeatures
    track_count: int


@dataclass(frozen=True, slots=True)
class ScoredMatch:
    track: Track
    score: float
