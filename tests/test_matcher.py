import unittest

from taste_matcher.matcher import match_tracks, normalize_tempo, score_track
from taste_matcher.models import AudioFeatures, TasteProfile, Track


def _features(value: float = 0.5, tempo: float = 120.0) -> AudioFeatures:
    return AudioFeatures(
        acousticness=value,
        danceability=value,
        energy=value,
        instrumentalness=value,
        valence=value,
        tempo=tempo,
    )


def _profile(value: float = 0.5, tempo: float = 120.0) -> TasteProfile:
    return TasteProfile(mean=_features(value, tempo), stddev=_features(0.0, 0.0), track_count=1)


def _track(track_id: str, artist: str | None, features: AudioFeatures | None) -> Track:
    return Track(
        track_id=track_id,
        track_name=track_id.upper(),
        artist_names=[artist] if artist is not None else [],
        audio_features=features,
    )


class NormalizeTempoTests(unittest.TestCase):
    def test_maps_nominal_range_to_unit_interval(self) -> None:
        self.assertEqual(normalize_tempo(40.0), 0.0)
        self.assertEqual(normalize_tempo(200.0), 1.0)
        self.assertAlmostEqual(normalize_tempo(120.0), 0.5)

    def test_does_not_clamp_out_of_range_tempo(self) -> None:
        self.assertAlmostEqual(normalize_tempo(280.0), 1.5)
        self.assertAlmostEqual(normalize_tempo(0.0), -0.25)


class ScoreTrackTests(unittest.TestCase):
    def test_identical_features_score_zero(self) -> None:
        self.assertEqual(score_track(_profile(), _features()), 0.0)

    def test_sums_absolute_differences_with_normalized_tempo(self) -> None:
        # 5 * |0.9 - 0.5| + |1.0 - 0.5|
        self.assertAlmostEqual(score_track(_profile(), _features(0.9, tempo=200.0)), 2.5)

    def test_distance_is_symmetric_around_mean(self) -> None:
        above = score_track(_profile(), _features(0.7, tempo=136.0))
        below = score_track(_profile(), _features(0.3, tempo=104.0))
        self.assertAlmostEqual(above, below)

    def test_stddev_does_not_affect_score(self) -> None:
        wide = TasteProfile(mean=_features(), stddev=_features(0.4, 30.0), track_count=5)
        self.assertAlmostEqual(score_track(wide, _features(0.6)), score_track(_profile(), _features(0.6)))


class MatchTracksTests(unittest.TestCase):
    def test_end_to_end_orders_by_score(self) -> None:
        x = _track("x", "Artist X", _features(0.5, 120.0))
        y = _track("y", "Artist Y", _features(0.9, 200.0))

        result = match_tracks(_profile(), [y, x])

        self.assertEqual([m.track.track_id for m in result], ["x", "y"])
        self.assertEqual(result[0].score, 0.0)
        self.assertGreater(result[1].score, 0.0)

    def test_keeps_best_track_per_primary_artist(self) -> None:
        worse = _track("worse", "Same", _features(0.5 + 0.7 / 5))
        better = _track("better", "Same", _features(0.5 + 0.3 / 5))

        result = match_tracks(_profile(), [worse, better])

        self.assertEqual(len(result), 1)
        self.assertEqual(result[0].track.track_id, "better")
        self.assertAlmostEqual(result[0].score, 0.3)

    def test_at_most_one_track_per_primary_artist(self) -> None:
        pool = [
            _track(f"{artist}{i}", artist, _features(0.1 * i))
            for artist in ("A", "B", "C")
            for i in range(1, 6)
        ]

        result = match_tracks(_profile(), pool)

        primaries = [m.track.primary_artist for m in result]
        self.assertEqual(sorted(primaries), ["A", "B", "C"])
        self.assertEqual(len(primaries), len(set(primaries)))

    def test_only_primary_artist_is_deduplicated(self) -> None:
        lead = Track("1", "One", ["Lead", "Guest"], audio_features=_features())
        guest_led = Track("2", "Two", ["Guest"], audio_features=_features(0.6))

        result = match_tracks(_profile(), [lead, guest_led])

        self.assertEqual([m.track.track_id for m in result], ["1", "2"])

    def test_output_scores_are_non_decreasing(self) -> None:
        pool = [_track(str(i), f"artist{i}", _features(v, t)) for i, (v, t) in enumerate(
            [(0.9, 60.0), (0.4, 125.0), (0.55, 118.0), (0.0, 40.0), (0.5, 150.0)]
        )]

        scores = [m.score for m in match_tracks(_profile(), pool)]

        self.assertEqual(len(scores), 5)
        self.assertEqual(scores, sorted(scores))

    def test_equal_scores_keep_input_order(self) -> None:
        pool = [_track(name, f"artist-{name}", _features(0.6)) for name in ("c", "a", "b")]

        result = match_tracks(_profile(), pool)

        self.assertEqual([m.track.track_id for m in result], ["c", "a", "b"])

    def test_equal_scores_same_artist_keeps_first_in_input(self) -> None:
        first = _track("first", "Dup", _features(0.6))
        second = _track("second", "Dup", _features(0.6))

        result = match_tracks(_profile(), [first, second])

        self.assertEqual([m.track.track_id for m in result], ["first"])

    def test_skips_candidates_without_features(self) -> None:
        result = match_tracks(_profile(), [_track("none", "A", None), _track("some", "B", _features())])

        self.assertEqual([m.track.track_id for m in result], ["some"])

    def test_featureless_track_does_not_claim_artist(self) -> None:
        result = match_tracks(_profile(), [_track("none", "A", None), _track("some", "A", _features(0.9))])

        self.assertEqual([m.track.track_id for m in result], ["some"])

    def test_tracks_without_artists_share_one_slot(self) -> None:
        pool = [_track("n1", None, _features(0.6)), _track("n2", None, _features(0.5))]

        result = match_tracks(_profile(), pool)

        self.assertEqual([m.track.track_id for m in result], ["n2"])

    def test_out_of_range_tempo_is_scored_not_rejected(self) -> None:
        result = match_tracks(_profile(), [_track("fast", "A", _features(0.5, tempo=360.0))])

        self.assertEqual(len(result), 1)
        self.assertAlmostEqual(result[0].score, 1.5)

    def test_empty_pool_returns_empty_list(self) -> None:
        self.assertEqual(match_tracks(_profile(), []), [])

    def test_limit_applies_after_diversification(self) -> None:
        pool = [
            _track("a1", "A", _features(0.5)),
            _track("a2", "A", _features(0.51)),
            _track("b1", "B", _features(0.6)),
            _track("c1", "C", _features(0.7)),
        ]

        result = match_tracks(_profile(), pool, limit=2)

        self.assertEqual([m.track.track_id for m in result], ["a1", "b1"])
        self.assertEqual(match_tracks(_profile(), pool, limit=0), [])

    def test_negative_limit_raises(self) -> None:
        with self.assertRaises(ValueError):
            match_tracks(_profile(), [], limit=-1)

    def test_repeated_calls_are_identical(self) -> None:
        pool = [_track(str(i), f"artist{i % 3}", _features(0.1 * i, 60.0 + 15 * i)) for i in range(9)]

        self.assertEqual(match_tracks(_profile(), pool), match_tracks(_profile(), pool))

    def test_does_not_modify_candidate_pool(self) -> None:
        pool = [_track("y", "Y", _features(0.9)), _track("x", "X", _features(0.5))]
        snapshot = list(pool)

        match_tracks(_profile(), pool)

        self.assertEqual(pool, snapshot)


if __name__ == "__main__":
    unittest.main()
