"""
Gesture recognition from hand landmarks.
Turns the per-frame landmark stream into debounced runner controls:
swipe left/right (lane change), jump and slide.
"""
from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional, Sequence, Tuple, Union
import time

from .config import GestureConfig
from .landmarks import HandLandmarks
from .smoothing import ExponentialSmoother, MotionHistory


class Gesture(Enum):
    """Detected gesture types."""
    NONE = auto()
    SWIPE_LEFT = auto()
    SWIPE_RIGHT = auto()
    JUMP = auto()     # Hand held in the top zone
    SLIDE = auto()    # Hand held in the bottom zone


class Zone(Enum):
    HIGH = auto()
    LOW = auto()


ZONE_GESTURES = {
    Zone.HIGH: Gesture.JUMP,
    Zone.LOW: Gesture.SLIDE,
}


@dataclass
class ZoneHold:
    """Continuous presence in a zone since start_time, entered at reference_y."""
    zone: Zone
    start_time: float
    reference_y: float


@dataclass
class GestureState:
    """Current gesture state with additional info."""
    gesture: Gesture
    hand_position: Tuple[float, float] = (0.5, 0.5)  # Smoothed
    hand_seen: bool = False
    zone: Optional[Zone] = None
    history_size: int = 0
    cooling_down: bool = False


class ZoneDetector:
    """
    Hold-based pose detection for the high (jump) and low (slide) bands.

    A single optional hold means the hand can never be in both zones at once.
    """

    def __init__(self, config: GestureConfig):
        self._config = config
        self._hold: Optional[ZoneHold] = None

    @property
    def hold(self) -> Optional[ZoneHold]:
        return self._hold

    def classify(self, y: float) -> Optional[Zone]:
        if y < self._config.jump_zone_y:
            return Zone.HIGH
        if y > self._config.slide_zone_y:
            return Zone.LOW
        return None

    def reset(self) -> None:
        self._hold = None

    def detect(self, history: MotionHistory, now: float) -> Optional[Gesture]:
        """
        Returns:
            None if the hand is outside both zones (frame not claimed),
            Gesture.NONE while a hold is in progress, JUMP/SLIDE on confirm.
        """
        y = history.newest.y
        zone = self.classify(y)

        if zone is None:
            self._hold = None
            return None

        if self._hold is None or self._hold.zone is not zone:
            self._hold = ZoneHold(zone=zone, start_time=now, reference_y=y)
            return Gesture.NONE

        # Moving through the zone, not holding a pose
        if abs(y - self._hold.reference_y) > self._config.zone_max_drift:
            self._hold = None
            return Gesture.NONE

        if now - self._hold.start_time >= self._config.zone_hold_ms:
            self._hold = None
            return ZONE_GESTURES[zone]

        return Gesture.NONE


class SwipeDetector:
    """Fast, horizontally dominant displacement across the history window."""

    def __init__(self, config: GestureConfig):
        self._config = config

    def detect(self, history: MotionHistory, now: float) -> Optional[Gesture]:
        cfg = self._config
        if len(history) < cfg.swipe_min_samples:
            return Gesture.NONE

        start = history.oldest
        end = history.newest
        dt = end.timestamp - start.timestamp

        # Too slow or stale to be a deliberate swipe
        if dt > cfg.swipe_time_limit_ms:
            return Gesture.NONE

        dx = end.x - start.x
        dy = end.y - start.y
        abs_dx = abs(dx)
        abs_dy = abs(dy)
        speed = abs_dx / dt if dt > 0 else 0.0

        if abs_dx <= cfg.swipe_min_distance or speed < cfg.swipe_min_speed:
            return Gesture.NONE

        # Diagonals: the axis ratio and the absolute drift cap must both hold
        if abs_dx <= abs_dy * cfg.swipe_dominant_axis_factor:
            return Gesture.NONE
        if abs_dy >= cfg.swipe_max_vertical_drift:
            return Gesture.NONE

        return Gesture.SWIPE_LEFT if dx < 0 else Gesture.SWIPE_RIGHT


LandmarkInput = Union[HandLandmarks, Sequence, None]


class GestureRecognizer:
    """
    Recognizes runner gestures from hand landmarks.

    Gestures detected:
    - Jump: Hand held steady in the top zone
    - Slide: Hand held steady in the bottom zone
    - Swipe left/right: Fast horizontal hand movement

    Detection runs as an ordered pipeline (zones, then swipes). The first
    stage that claims a frame decides it, so a hand inside a zone never
    produces a swipe. After any gesture, nothing fires until the cooldown
    has elapsed.
    """

    def __init__(self, config: Optional[GestureConfig] = None):
        """
        Initialize gesture recognizer.

        Args:
            config: Gesture detection thresholds
        """
        self._config = config or GestureConfig()

        self._smoother = ExponentialSmoother(self._config.smoothing_alpha)
        self._history = MotionHistory(self._config.history_size)
        self._zones = ZoneDetector(self._config)
        self._swipes = SwipeDetector(self._config)
        self._pipeline = (self._zones, self._swipes)

        self._last_gesture_time: Optional[float] = None  # None = cooldown expired

    @property
    def config(self) -> GestureConfig:
        return self._config

    @property
    def history(self) -> MotionHistory:
        return self._history

    @property
    def zone_hold(self) -> Optional[ZoneHold]:
        return self._zones.hold

    @property
    def smoothed_position(self) -> Tuple[float, float]:
        return self._smoother.value

    @property
    def last_gesture_time(self) -> Optional[float]:
        return self._last_gesture_time

    def is_cooling_down(self, now_ms: float) -> bool:
        if self._last_gesture_time is None:
            return False
        return now_ms - self._last_gesture_time < self._config.cooldown_ms

    def analyze(self, landmarks: LandmarkInput, now_ms: Optional[float] = None) -> Gesture:
        """Classify one frame. Call at most once per frame."""
        return self.update(landmarks, now_ms).gesture

    def update(self, landmarks: LandmarkInput, now_ms: Optional[float] = None) -> GestureState:
        """
        Update gesture detection with the latest landmarks.

        Args:
            landmarks: Landmarks of the first tracked hand, a sequence of 21
                       points, or None when no hand is detected.
            now_ms: Frame timestamp in milliseconds. Defaults to perf_counter.

        Returns:
            GestureState; a non-NONE gesture is a one-shot event.
        """
        if now_ms is None:
            now_ms = time.perf_counter() * 1000.0

        hand_seen = landmarks is not None and len(self._points(landmarks)) > 0

        # 1. Global debounce, no state changes while cooling down
        if self.is_cooling_down(now_ms):
            return self._state(Gesture.NONE, hand_seen=hand_seen, cooling_down=True)

        # 2. Hand lost: drop in-flight evidence
        if not hand_seen:
            self._history.clear()
            self._zones.reset()
            return self._state(Gesture.NONE, hand_seen=False)

        # 3. Smooth and record
        x, y = self._tracked_point(landmarks)
        if not self._history:
            self._smoother.reset(x, y)
        else:
            self._smoother(x, y)
        sx, sy = self._smoother.value
        self._history.append(sx, sy, now_ms)

        # 4. Ordered detection pipeline
        gesture = Gesture.NONE
        for stage in self._pipeline:
            result = stage.detect(self._history, now_ms)
            if result is not None:
                gesture = result
                break

        if gesture is not Gesture.NONE:
            self._fire(now_ms)

        return self._state(gesture, hand_seen=True)

    def reset(self) -> None:
        """Reset gesture state."""
        self._smoother.reset(0.5, 0.5)
        self._history.clear()
        self._zones.reset()
        self._last_gesture_time = None

    def _fire(self, now_ms: float) -> None:
        self._last_gesture_time = now_ms
        self._history.clear()
        self._zones.reset()

    def _tracked_point(self, landmarks: LandmarkInput) -> Tuple[float, float]:
        if not isinstance(landmarks, HandLandmarks):
            landmarks = HandLandmarks.from_points(landmarks)
        x, y = landmarks.tracked_point
        if self._config.mirror_x:
            x = 1.0 - x
        return x, y

    @staticmethod
    def _points(landmarks: LandmarkInput) -> Sequence:
        if isinstance(landmarks, HandLandmarks):
            return landmarks.landmarks
        return landmarks

    def _state(self, gesture: Gesture, hand_seen: bool, cooling_down: bool = False) -> GestureState:
        hold = self._zones.hold
        return GestureState(
            gesture=gesture,
            hand_position=self._smoother.value,
            hand_seen=hand_seen,
            zone=hold.zone if hold else None,
            history_size=len(self._history),
            cooling_down=cooling_down,
        )
