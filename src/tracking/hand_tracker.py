"""
MediaPipe Hand Tracker wrapper using the Tasks API.
Handles camera capture and hand landmark detection.
"""
from pathlib import Path
from typing import Optional
import time
import cv2
import numpy as np
import mediapipe as mp

from .config import Config, CameraConfig, MediaPipeConfig
from .landmarks import HandLandmarks, HAND_CONNECTIONS

# MediaPipe Tasks API imports
BaseOptions = mp.tasks.BaseOptions
HandLandmarker = mp.tasks.vision.HandLandmarker
HandLandmarkerOptions = mp.tasks.vision.HandLandmarkerOptions
VisionRunningMode = mp.tasks.vision.RunningMode


class HandTracker:
    """
    MediaPipe hand tracking wrapper with camera management.
    Uses the MediaPipe Tasks API (0.10+) in VIDEO mode.

    Only the first detected hand is reported. When start() fails, hand
    tracking is unavailable and callers must not feed the gesture engine.
    """

    # Default model path relative to project root
    DEFAULT_MODEL_PATH = Path(__file__).parent.parent.parent / "models" / "hand_landmarker.task"

    def __init__(self, config: Config, model_path: Optional[Path] = None):
        """
        Initialize hand tracker.

        Args:
            config: HandRunner configuration
            model_path: Path to hand_landmarker.task model file
        """
        self._camera_config: CameraConfig = config.camera
        self._mp_config: MediaPipeConfig = config.mediapipe
        if model_path is None and self._mp_config.model_path:
            model_path = Path(self._mp_config.model_path)
        self._model_path = model_path or self.DEFAULT_MODEL_PATH

        # Lazy initialization
        self._cap: Optional[cv2.VideoCapture] = None
        self._landmarker: Optional[HandLandmarker] = None

        self._is_running = False
        self._last_frame: Optional[np.ndarray] = None
        self._frame_count = 0
        self._start_perf: float = 0
        self._last_timestamp_ms: int = -1
        self._unavailable_reason: str = ""

    def start(self) -> bool:
        """
        Start camera capture and MediaPipe.

        Returns:
            True if started successfully, False if tracking is unavailable
            (see unavailable_reason).
        """
        if self._is_running:
            return True

        if not self._model_path.exists():
            self._unavailable_reason = f"Model file not found: {self._model_path}"
            print(f"ERROR: {self._unavailable_reason}")
            print("Download from: https://storage.googleapis.com/mediapipe-models/hand_landmarker/hand_landmarker/float16/1/hand_landmarker.task")
            return False

        self._cap = cv2.VideoCapture(self._camera_config.device_id)
        if not self._cap.isOpened():
            self._unavailable_reason = f"Could not open camera {self._camera_config.device_id}"
            self._cap.release()
            self._cap = None
            return False

        self._cap.set(cv2.CAP_PROP_FRAME_WIDTH, self._camera_config.width)
        self._cap.set(cv2.CAP_PROP_FRAME_HEIGHT, self._camera_config.height)
        self._cap.set(cv2.CAP_PROP_FPS, self._camera_config.fps)

        options = HandLandmarkerOptions(
            base_options=BaseOptions(model_asset_path=str(self._model_path)),
            running_mode=VisionRunningMode.VIDEO,
            num_hands=self._mp_config.num_hands,
            min_hand_detection_confidence=self._mp_config.min_detection_confidence,
            min_tracking_confidence=self._mp_config.min_tracking_confidence,
        )

        try:
            self._landmarker = HandLandmarker.create_from_options(options)
        except (RuntimeError, ValueError) as e:
            self._unavailable_reason = f"Failed to initialize hand tracking: {e}"
            print(f"ERROR: {self._unavailable_reason}")
            self._cap.release()
            self._cap = None
            return False

        self._start_perf = time.perf_counter()
        self._last_timestamp_ms = -1
        self._unavailable_reason = ""
        self._is_running = True
        return True

    def stop(self) -> None:
        """Stop camera capture and release resources."""
        self._is_running = False

        if self._landmarker:
            self._landmarker.close()
            self._landmarker = None

        if self._cap:
            self._cap.release()
            self._cap = None

        self._last_frame = None

    def read_frame(self) -> Optional[np.ndarray]:
        """Read the next camera frame (mirrored if configured)."""
        if not self._is_running or self._cap is None:
            return None

        ret, frame = self._cap.read()
        if not ret:
            return None

        self._frame_count += 1
        if self._camera_config.mirror:
            frame = cv2.flip(frame, 1)
        self._last_frame = frame
        return frame

    def detect(self, frame: np.ndarray, timestamp_ms: Optional[int] = None) -> Optional[HandLandmarks]:
        """
        Detect hand landmarks in a BGR frame.

        Args:
            frame: BGR image
            timestamp_ms: Frame time. Bumped when not strictly increasing,
                          as VIDEO mode requires.

        Returns:
            Landmarks of the first hand, or None if no hand is found.
        """
        if self._landmarker is None:
            return None

        if timestamp_ms is None:
            timestamp_ms = int((time.perf_counter() - self._start_perf) * 1000)
        if timestamp_ms <= self._last_timestamp_ms:
            timestamp_ms = self._last_timestamp_ms + 1
        self._last_timestamp_ms = timestamp_ms

        rgb_frame = cv2.cvtColor(frame, cv2.COLOR_BGR2RGB)
        rgb_frame.flags.writeable = False
        mp_image = mp.Image(image_format=mp.ImageFormat.SRGB, data=rgb_frame)

        result = self._landmarker.detect_for_video(mp_image, timestamp_ms)

        if not result.hand_landmarks:
            return None

        handedness = result.handedness[0][0]
        return HandLandmarks.from_points(
            result.hand_landmarks[0],
            handedness=handedness.category_name,
            confidence=handedness.score,
        )

    def get_landmarks(self) -> Optional[HandLandmarks]:
        """Capture a frame and detect hand landmarks."""
        frame = self.read_frame()
        if frame is None:
            return None
        return self.detect(frame)

    def get_frame_with_landmarks(
        self,
        landmarks: Optional[HandLandmarks] = None,
        black_background: bool = False
    ) -> Optional[np.ndarray]:
        """
        Get last frame with optional landmark overlay for debugging.

        Args:
            landmarks: If provided, draw landmarks on frame.
            black_background: If True, draw on black instead of camera image.

        Returns:
            Frame with landmarks drawn, or None if no frame available.
        """
        if self._last_frame is None:
            return None

        if black_background:
            frame = np.zeros_like(self._last_frame)
        else:
            frame = self._last_frame.copy()

        if landmarks is not None:
            h, w = frame.shape[:2]
            for x, y, _ in landmarks.landmarks:
                cv2.circle(frame, (int(x * w), int(y * h)), 5, (255, 0, 255), -1)

            for start_idx, end_idx in HAND_CONNECTIONS:
                start = landmarks.landmarks[start_idx]
                end = landmarks.landmarks[end_idx]
                start_pos = (int(start[0] * w), int(start[1] * h))
                end_pos = (int(end[0] * w), int(end[1] * h))
                cv2.line(frame, start_pos, end_pos, (255, 243, 0), 2)

        return frame

    @property
    def is_running(self) -> bool:
        return self._is_running

    @property
    def unavailable_reason(self) -> str:
        return self._unavailable_reason

    @property
    def frame_count(self) -> int:
        return self._frame_count
