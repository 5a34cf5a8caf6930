import pytest
from src.tracking.config import GestureConfig
from src.tracking.gesture_recognizer import Gesture, GestureRecognizer, SwipeDetector, Zone
from src.tracking.landmarks import HandLandmarks

from helpers import feed, make_hand

SWIPE_LEFT_SAMPLES = [(0, 0.6, 0.5), (50, 0.6, 0.5), (100, 0.3, 0.5), (150, 0.3, 0.5)]


def test_initial_state(recognizer):
    assert recognizer.smoothed_position == (0.5, 0.5)
    assert len(recognizer.history) == 0
    assert recognizer.zone_hold is None
    assert recognizer.last_gesture_time is None
    assert not recognizer.is_cooling_down(0)


def test_no_hand_always_none(recognizer):
    for t in range(0, 1000, 33):
        state = recognizer.update(None, t)
        assert state.gesture is Gesture.NONE
        assert state.hand_seen is False
        assert len(recognizer.history) == 0


def test_empty_landmark_list_is_no_hand(recognizer):
    feed(recognizer, [(0, 0.5, 0.5)])
    assert recognizer.analyze([], 30) is Gesture.NONE
    assert len(recognizer.history) == 0


def test_hand_lost_resets_state(recognizer):
    feed(recognizer, [(0, 0.5, 0.15), (40, 0.5, 0.15)])
    assert recognizer.zone_hold is not None
    assert len(recognizer.history) == 2

    recognizer.update(None, 80)

    assert recognizer.zone_hold is None
    assert len(recognizer.history) == 0


def test_hand_lost_mid_swipe_discards_evidence(recognizer):
    gestures = feed(recognizer, SWIPE_LEFT_SAMPLES[:3])
    recognizer.update(None, 120)
    gestures += feed(recognizer, SWIPE_LEFT_SAMPLES[3:])

    assert all(g is Gesture.NONE for g in gestures)
    assert len(recognizer.history) == 1


def test_reacquire_snaps_smoothing(recognizer):
    feed(recognizer, [(0, 0.5, 0.5), (30, 0.6, 0.5)])
    recognizer.update(None, 60)

    recognizer.update(make_hand(0.2, 0.4), 90)

    assert recognizer.smoothed_position == (0.2, 0.4)


def test_smoothing_applies_while_tracking(recognizer):
    feed(recognizer, [(0, 0.6, 0.5), (30, 0.9, 0.5)])

    x, y = recognizer.smoothed_position
    assert x == pytest.approx(0.69)
    assert y == pytest.approx(0.5)


def test_cooldown_blocks_everything(recognizer):
    assert feed(recognizer, SWIPE_LEFT_SAMPLES)[-1] is Gesture.SWIPE_LEFT
    assert recognizer.last_gesture_time == 150

    # A held jump pose during cooldown is not even started
    for t in range(160, 500, 20):
        state = recognizer.update(make_hand(0.5, 0.1), t)
        assert state.gesture is Gesture.NONE
        assert state.cooling_down is True
    assert recognizer.zone_hold is None
    assert len(recognizer.history) == 0


def test_cooldown_expires(recognizer):
    feed(recognizer, SWIPE_LEFT_SAMPLES)

    state = recognizer.update(make_hand(0.5, 0.5), 500)

    assert state.cooling_down is False
    assert state.history_size == 1


def test_first_sample_after_gesture_snaps(recognizer):
    feed(recognizer, SWIPE_LEFT_SAMPLES)
    assert recognizer.smoothed_position[0] == pytest.approx(0.447)

    recognizer.update(make_hand(0.9, 0.5), 500)

    assert recognizer.smoothed_position == (0.9, 0.5)


def test_zone_suppresses_swipe(recognizer):
    # Swipe-shaped motion while the hand sits in the jump zone
    samples = [(0, 0.6, 0.15), (30, 0.6, 0.15), (60, 0.3, 0.15), (90, 0.3, 0.15)]
    states = [recognizer.update(make_hand(x, y), t) for t, x, y in samples]

    assert all(s.gesture is Gesture.NONE for s in states)
    assert states[-1].zone is Zone.HIGH
    assert len(recognizer.history) == 4

    # The same history would have been a swipe outside the zone
    swipes = SwipeDetector(recognizer.config)
    assert swipes.detect(recognizer.history, 90) is Gesture.SWIPE_LEFT


def test_one_gesture_per_call(recognizer):
    gestures = feed(recognizer, [(t, 0.5, 0.15) for t in range(0, 2000, 20)])
    fired = [g for g in gestures if g is not Gesture.NONE]

    assert set(fired) == {Gesture.JUMP}
    # Hold + cooldown spacing: never two gestures within 350 ms
    times = [t for t, g in zip(range(0, 2000, 20), gestures) if g is not Gesture.NONE]
    assert all(b - a >= 350 for a, b in zip(times, times[1:]))


def test_accepts_raw_point_sequence(recognizer):
    class Point:
        def __init__(self, x, y):
            self.x, self.y, self.z = x, y, 0.0

    recognizer.update([Point(0.3, 0.4)] * 21, 0)
    assert recognizer.smoothed_position == (0.3, 0.4)

    recognizer.update([(0.3, 0.4)] * 21, 30)
    assert recognizer.smoothed_position == pytest.approx((0.3, 0.4))


def test_rejects_wrong_point_count(recognizer):
    with pytest.raises(ValueError):
        recognizer.update([(0.5, 0.5)] * 5, 0)


def test_tracked_point_is_wrist_middle_mcp_midpoint():
    points = [(0.0, 0.0, 0.0)] * 21
    points[HandLandmarks.WRIST] = (0.4, 0.8, 0.0)
    points[HandLandmarks.MIDDLE_MCP] = (0.6, 0.6, 0.0)
    hand = HandLandmarks(landmarks=points)

    assert hand.tracked_point == pytest.approx((0.5, 0.7))


def test_reset_restores_neutral_state(recognizer):
    feed(recognizer, SWIPE_LEFT_SAMPLES)
    recognizer.reset()

    assert recognizer.smoothed_position == (0.5, 0.5)
    assert recognizer.last_gesture_time is None
    assert len(recognizer.history) == 0


def test_independent_instances():
    a = GestureRecognizer()
    b = GestureRecognizer(GestureConfig())
    feed(a, SWIPE_LEFT_SAMPLES)

    assert a.last_gesture_time == 150
    assert b.last_gesture_time is None
    assert len(b.history) == 0


def test_array_landmarks_during_cooldown(recognizer):
    np = pytest.importorskip("numpy")
    feed(recognizer, SWIPE_LEFT_SAMPLES)

    state = recognizer.update(np.full((21, 2), 0.5), 200)

    assert state.gesture is Gesture.NONE
    assert state.cooling_down is True
    assert state.hand_seen is True


def test_array_landmarks_outside_cooldown(recognizer):
    np = pytest.importorskip("numpy")

    state = recognizer.update(np.full((21, 2), 0.4), 0)

    assert state.hand_seen is True
    assert recognizer.smoothed_position == pytest.approx((0.4, 0.4))
    assert recognizer.update(np.empty((0, 2)), 30).hand_seen is False


def test_cooldown_boundary(recognizer):
    feed(recognizer, SWIPE_LEFT_SAMPLES)

    assert recognizer.update(make_hand(0.5, 0.5), 499).cooling_down is True
    state = recognizer.update(make_hand(0.5, 0.5), 500)
    assert state.cooling_down is False
    assert state.history_size == 1


def test_smoothing_damps_short_step_below_swipe_distance(recognizer):
    # Smoothing shrinks a raw 0.15 step to under 0.12 within the window
    gestures = feed(recognizer, [
        (0, 0.6, 0.5), (50, 0.6, 0.5), (100, 0.45, 0.5), (150, 0.45, 0.5), (200, 0.45, 0.5),
    ])

    assert gestures == [Gesture.NONE] * 5
    assert recognizer.history.newest.x - recognizer.history.oldest.x > -0.12
