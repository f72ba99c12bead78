"""Tests for frame index selection and seek planning."""

import pytest

from ffmpegx.frames.indices import (
    DEFAULT_KEYFRAME_INTERVAL,
    SeekPlan,
    dedupe_indices,
    estimate_keyframe_interval,
    indices_by_count,
    indices_by_rate,
    plan_seek,
)


class TestIndicesByCount:
    """Tests for indices_by_count()."""

    def test_segment_midpoints(self) -> None:
        """Should pick the middle frame of each equal segment."""
        assert indices_by_count(100, 4) == [12, 37, 62, 87]

    def test_single_frame(self) -> None:
        """Should pick the middle frame when one frame is requested."""
        assert indices_by_count(250, 1) == [125]

    def test_capped_at_total(self) -> None:
        """Should never return more indices than frames."""
        assert indices_by_count(3, 10) == [0, 1, 2]

    @pytest.mark.parametrize(("total", "requested"), [(250, 7), (1000, 13), (29, 29)])
    def test_ascending_and_in_range(self, total: int, requested: int) -> None:
        """Should produce strictly ascending indices within the video."""
        indices = indices_by_count(total, requested)
        assert len(indices) == requested
        assert indices == sorted(set(indices))
        assert 0 <= indices[0] and indices[-1] < total

    @pytest.mark.parametrize(("total", "requested"), [(0, 5), (10, -1)])
    def test_invalid(self, total: int, requested: int) -> None:
        """Should reject an empty video or a negative request."""
        with pytest.raises(ValueError):
            indices_by_count(total, requested)

    def test_zero_requested(self) -> None:
        """Should return no indices when zero frames are requested."""
        assert indices_by_count(100, 0) == []
        assert indices_by_count(1, 0) == []


class TestIndicesByRate:
    """Tests for indices_by_rate()."""

    def test_every_nth_frame(self) -> None:
        """Should step by round(source / target)."""
        assert indices_by_rate(100, 25.0, 1.0) == [0, 25, 50, 75]

    def test_rounding(self) -> None:
        """Should round the step to the nearest integer."""
        # 29.97 / 10 = 2.997 -> step 3
        assert indices_by_rate(10, 29.97, 10.0) == [0, 3, 6, 9]

    def test_step_at_least_one(self) -> None:
        """Should take every frame when the target exceeds the source rate."""
        assert indices_by_rate(5, 25.0, 100.0) == [0, 1, 2, 3, 4]

    def test_invalid(self) -> None:
        """Should reject non-positive rates."""
        with pytest.raises(ValueError):
            indices_by_rate(100, 25.0, 0)


def test_dedupe_keeps_first_occurrence() -> None:
    """Should drop repeats and keep first-seen order."""
    assert dedupe_indices([0, 5, 5, 2, 0, 7]) == [0, 5, 2, 7]


class TestEstimateKeyframeInterval:
    """Tests for estimate_keyframe_interval()."""

    def test_from_frame_rate(self) -> None:
        """Should assume a 250-frame GOP."""
        assert estimate_keyframe_interval(25.0) == pytest.approx(10.0)

    def test_minimum_two_seconds(self) -> None:
        """Should clamp high frame rates to 2 seconds."""
        assert estimate_keyframe_interval(240.0) == 2.0

    @pytest.mark.parametrize("rate", [None, 0.0])
    def test_default(self, rate) -> None:
        """Should fall back to the default when the rate is unknown."""
        assert estimate_keyframe_interval(rate) == DEFAULT_KEYFRAME_INTERVAL == 5.0


class TestPlanSeek:
    """Tests for plan_seek()."""

    def test_near_start(self) -> None:
        """Should seek precisely from zero within the first interval."""
        assert plan_seek(3.0, 5.0) == SeekPlan(coarse_seconds=0.0, offset_seconds=3.0)

    def test_later_target(self) -> None:
        """Should back off one interval for the coarse seek."""
        plan = plan_seek(42.0, 10.0)
        assert plan.coarse_seconds == 32.0
        assert plan.offset_seconds == 10.0

    @pytest.mark.parametrize(
        ("target", "coarse", "offset"),
        [(10.0, 5.0, 5.0), (2.0, 0.0, 2.0), (5.0, 0.0, 5.0)],
    )
    def test_known_values(self, target: float, coarse: float, offset: float) -> None:
        """Should match worked examples for a five second interval."""
        assert plan_seek(target, 5.0) == SeekPlan(
            coarse_seconds=coarse, offset_seconds=offset
        )

    @pytest.mark.parametrize("target", [0.0, 0.04, 4.99, 5.0, 17.3, 3600.25])
    def test_invariants(self, target: float) -> None:
        """Should split the target without overshooting the interval."""
        plan = plan_seek(target, 5.0)
        assert plan.coarse_seconds >= 0
        assert plan.coarse_seconds + plan.offset_seconds == pytest.approx(target)
        assert plan.offset_seconds <= 5.0 + 1e-9
