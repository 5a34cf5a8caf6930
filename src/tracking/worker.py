"""
Background worker for MediaPipe hand tracking and gesture recognition.
Runs in a separate QThread to avoid blocking the game loop.
"""
import time
import threading
from typing import Optional
from PyQt5.QtCore import QObject, pyqtSignal

from .hand_tracker import HandTracker
from .landmarks import HandLandmarks
from .gesture_recognizer import GestureRecognizer, GestureState, Gesture


class TrackingWorker(QObject):
    """
    Detection is throttled to config.loop.detection_interval_ms on a capture
    thread; the recognizer runs once per render tick on the worker thread,
    reusing the most recent detection between captures.
    """
    # Signals
    gesture_detected = pyqtSignal(object)  # Emits GestureState (non-NONE only)
    hand_lost = pyqtSignal()
    tracking_unavailable = pyqtSignal(str)
    error = pyqtSignal(str)

    def __init__(self, config, parent=None):
        super().__init__(parent)
        self._config = config
        self._tracker: Optional[HandTracker] = None
        self._recognizer: Optional[GestureRecognizer] = None
        self._is_running = False
        self._hand_seen = False

        self._latest_landmarks: Optional[HandLandmarks] = None
        self._landmarks_lock = threading.Lock()
        self._capture_thread: Optional[threading.Thread] = None

    def _capture_loop(self):
        """Background thread running landmark detection at a fixed interval."""
        interval = self._config.loop.detection_interval_ms / 1000.0
        while self._is_running:
            started = time.perf_counter()
            try:
                landmarks = self._tracker.get_landmarks()
                with self._landmarks_lock:
                    self._latest_landmarks = landmarks
            except Exception as e:
                print(f"Capture thread error: {e}")
                time.sleep(0.1)
                continue

            remaining = interval - (time.perf_counter() - started)
            if remaining > 0:
                time.sleep(remaining)

    def _render_tick(self, now_ms: float) -> GestureState:
        """Run the recognizer once on the latest detection and emit signals."""
        # Not consumed: the same detection is reused until replaced
        with self._landmarks_lock:
            landmarks = self._latest_landmarks

        state = self._recognizer.update(landmarks, now_ms)

        if self._hand_seen and landmarks is None:
            self.hand_lost.emit()
        self._hand_seen = landmarks is not None

        if state.gesture is not Gesture.NONE:
            self.gesture_detected.emit(state)
        return state

    def start_process(self):
        """Main processing loop. Runs in worker thread at the render rate."""
        self._tracker = HandTracker(self._config)
        self._recognizer = GestureRecognizer(self._config.gestures)
        self._hand_seen = False

        if not self._tracker.start():
            self.tracking_unavailable.emit(self._tracker.unavailable_reason)
            return

        self._is_running = True

        self._capture_thread = threading.Thread(target=self._capture_loop, daemon=True)
        self._capture_thread.start()

        tick_interval = 1.0 / self._config.loop.render_fps

        try:
            while self._is_running:
                tick_start = time.perf_counter()

                self._render_tick(tick_start * 1000.0)

                elapsed = time.perf_counter() - tick_start
                sleep_time = tick_interval - elapsed
                if sleep_time > 0:
                    time.sleep(sleep_time)

        except Exception as e:
            self.error.emit(f"Worker Exception: {str(e)}")
        finally:
            self._is_running = False
            if self._capture_thread:
                self._capture_thread.join(timeout=1.0)
            if self._tracker:
                self._tracker.stop()

    def stop_process(self):
        """Signal the loop to stop and release resources in worker thread."""
        self._is_running = False
