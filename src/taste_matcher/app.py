from __future__ import annotations

import argparse
import sys
import warnings

from taste_matcher.analysis import (
    NoFeatureDataError,
    attach_audio_features,
    build_track,
    compute_taste_profile,
    top_artists,
)
from taste_matcher.config import (
    DEFAULT_MATCH_LIMIT,
    DEFAULT_TOP_ARTIST_MIN_COUNT,
    env_int,
    load_local_env_file,
)
from taste_matcher.matcher import match_tracks
from taste_matcher.models import ScoredMatch, TasteProfile, Track
from taste_matcher.payloads import PayloadError, load_audio_features_payloads, load_track_payloads


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Match a reference playlist against a listener's taste profile")
    parser.add_argument("--top-tracks", required=True, help="JSON file with the listener's top tracks")
    parser.add_argument("--pool", required=True, help="JSON file with the reference playlist tracks")
    parser.add_argument(
        "--top-tracks-features",
        help="Optional audio-features JSON to merge into the top tracks",
    )
    parser.add_argument(
        "--pool-features",
        help="Optional audio-features JSON to merge into the pool tracks",
    )
    parser.add_argument(
        "--limit",
        type=int,
        default=env_int("MATCH_LIMIT", DEFAULT_MATCH_LIMIT),
        help=f"Number of matches to show (defaults to MATCH_LIMIT env or {DEFAULT_MATCH_LIMIT})",
    )
    parser.add_argument(
        "--min-artist-count",
        type=int,
        default=env_int("TOP_ARTIST_MIN_COUNT", DEFAULT_TOP_ARTIST_MIN_COUNT),
        help=(
            "Tracks an artist needs to count as a top artist "
            f"(defaults to TOP_ARTIST_MIN_COUNT env or {DEFAULT_TOP_ARTIST_MIN_COUNT})"
        ),
    )
    args = parser.parse_args(argv)
    if args.limit < 0:
        parser.error("--limit must be non-negative")
    return args


def load_tracks(tracks_path: str, features_path: str | None = None) -> list[Track]:
    tracks = [build_track(payload) for payload in load_track_payloads(tracks_path)]
    if features_path:
        tracks = attach_audio_features(tracks, load_audio_features_payloads(features_path))
    return tracks


def _warn_missing_features(label: str, tracks: list[Track]) -> None:
    missing = sum(1 for t in tracks if not t.has_audio_features)
    if missing:
        warnings.warn(
            f"{missing} of {len(tracks)} {label} have no audio features and were skipped.",
            RuntimeWarning,
            stacklevel=2,
        )


def format_profile(profile: TasteProfile) -> list[str]:
    lines = [f"Taste profile ({profile.track_count} tracks)"]
    stddevs = profile.stddev.as_dict()
    for name, mean in profile.mean.as_dict().items():
        lines.append(f"  {name:<17}{mean:8.3f} ± {stddevs[name]:.3f}")
    return lines


def format_matches(matches: list[ScoredMatch]) -> list[str]:
    if not matches:
        return ["No matching tracks found."]
    lines = ["Matched tracks"]
    for rank, match in enumerate(matches, start=1):
        artists = ", ".join(match.track.artist_names) or "Unknown"
        lines.append(f"  {rank:>2}. {match.track.track_name} - {artists}  [{match.score:.2f}]")
    return lines


def main(argv: list[str] | None = None) -> int:
    load_local_env_file()
    args = parse_args(argv)

    try:
        top_tracks = load_tracks(args.top_tracks, args.top_tracks_features)
        pool = load_tracks(args.pool, args.pool_features)
    except (OSError, PayloadError) as exc:
        print(f"Unable to read input: {exc}", file=sys.stderr)
        return 1

    try:
        profile = compute_taste_profile(top_tracks)
    except NoFeatureDataError as exc:
        print(f"Cannot build a taste profile: {exc}", file=sys.stderr)
        return 1

    _warn_missing_features("top tracks", top_tracks)
    _warn_missing_features("pool tracks", pool)

    matches = match_tracks(profile, pool, limit=args.limit)

    lines = format_profile(profile)
    lines.append("")
    lines.append("Top artists")
    artists = top_artists(top_tracks, min_count=args.min_artist_count)
    lines.extend(f"  {i}. {name}" for i, name in enumerate(artists, start=1))
    if not artists:
        lines.append("  (none)")
    lines.append("")
    lines.extend(format_matches(matches))
    print("\n".join(lines))
    return 0


if __name__ == "__main__":
    sys.exit(main())
