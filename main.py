"""
HandRunner - Hand-gesture controls for a three-lane runner

Entry point for the application.
"""
import argparse
import sys
import time
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent / "src"))


def parse_args():
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="HandRunner - Gesture controls for a lane runner",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to config file (default: config.yaml)",
    )

    parser.add_argument(
        "--camera",
        type=int,
        default=None,
        help="Camera device index (overrides config)",
    )

    parser.add_argument(
        "--no-mirror",
        action="store_true",
        help="Do not flip camera frames; the gesture engine mirrors x instead",
    )

    parser.add_argument(
        "--debug",
        action="store_true",
        help="Show camera window with landmarks, zones and gestures",
    )

    return parser.parse_args()


class RunnerControls:
    """Maps gestures to runner actions; lane changes clamp at the edges."""

    def __init__(self):
        self.lane = 0  # -1 left, 0 centre, 1 right

    def apply(self, gesture) -> str:
        from tracking import Gesture

        if gesture is Gesture.SWIPE_LEFT:
            self.lane = max(-1, self.lane - 1)
            return f"lane {self.lane}"
        if gesture is Gesture.SWIPE_RIGHT:
            self.lane = min(1, self.lane + 1)
            return f"lane {self.lane}"
        if gesture is Gesture.JUMP:
            return "jump"
        if gesture is Gesture.SLIDE:
            return "slide"
        return ""


def run_debug(config):
    """
    Run in debug mode - shows camera feed with landmarks and zone bands.
    Detection is throttled like the worker; recognition runs every frame.
    """
    import cv2
    from tracking import GestureRecognizer, Gesture
    from tracking.hand_tracker import HandTracker

    tracker = HandTracker(config)
    recognizer = GestureRecognizer(config.gestures)
    controls = RunnerControls()

    print("Starting debug mode...")
    print("Press 'q' to quit")
    print("-" * 40)

    if not tracker.start():
        print(f"ERROR: Hand tracking unavailable ({tracker.unavailable_reason})")
        return 1

    detect_interval = config.loop.detection_interval_ms / 1000.0
    last_detect = 0.0
    landmarks = None
    last_gesture = ""

    try:
        while True:
            frame = tracker.read_frame()
            if frame is None:
                print("ERROR: Camera read failed, stopping")
                break

            now = time.perf_counter()
            if now - last_detect >= detect_interval:
                landmarks = tracker.detect(frame)
                last_detect = now

            state = recognizer.update(landmarks, now * 1000.0)
            if state.gesture is not Gesture.NONE:
                action = controls.apply(state.gesture)
                last_gesture = state.gesture.name
                print(f"[{tracker.frame_count:5d}] {state.gesture.name} -> {action}")

            frame = tracker.get_frame_with_landmarks(landmarks)
            if frame is not None:
                h, w = frame.shape[:2]
                for zone_y in (config.gestures.jump_zone_y, config.gestures.slide_zone_y):
                    cv2.line(frame, (0, int(zone_y * h)), (w, int(zone_y * h)), (0, 200, 255), 1)

                sx, sy = state.hand_position
                if state.hand_seen:
                    cv2.circle(frame, (int(sx * w), int(sy * h)), 8, (0, 255, 0), -1)

                info_lines = [
                    f"Gesture: {last_gesture}",
                    f"Lane: {controls.lane}",
                    f"Zone: {state.zone.name if state.zone else '-'}",
                    f"History: {state.history_size}",
                ]
                for i, line in enumerate(info_lines):
                    cv2.putText(
                        frame, line, (10, 30 + i * 25),
                        cv2.FONT_HERSHEY_SIMPLEX, 0.6, (255, 255, 255), 1
                    )

                cv2.imshow("HandRunner Debug", frame)

            if cv2.waitKey(1) & 0xFF == ord('q'):
                break

    finally:
        tracker.stop()
        cv2.destroyAllWindows()

    return 0


def run_headless(config):
    """Run the tracking worker in a background thread and print actions."""
    import signal
    import atexit
    from PyQt5.QtCore import QCoreApplication, QThread, Qt
    from tracking.worker import TrackingWorker

    app = QCoreApplication(sys.argv)
    controls = RunnerControls()

    thread = QThread()
    worker = TrackingWorker(config)
    worker.moveToThread(thread)

    def cleanup():
        """Ensure camera is released on exit."""
        print("\nCleaning up camera resources...")
        worker.stop_process()
        thread.quit()
        thread.wait(2000)
        print("Cleanup complete.")

    atexit.register(cleanup)

    def signal_handler(signum, frame):
        """Handle Ctrl+C and kill signals gracefully."""
        print(f"\nReceived signal {signum}, shutting down...")
        app.quit()

    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)

    def handle_gesture(state):
        action = controls.apply(state.gesture)
        print(f"Action: {state.gesture.name} -> {action}")

    def handle_unavailable(reason):
        print(f"TRACKING UNAVAILABLE: {reason}")
        app.exit(1)

    thread.started.connect(worker.start_process)
    worker.gesture_detected.connect(handle_gesture, Qt.QueuedConnection)
    worker.hand_lost.connect(lambda: print("Hand lost"), Qt.QueuedConnection)
    worker.tracking_unavailable.connect(handle_unavailable, Qt.QueuedConnection)
    worker.error.connect(lambda msg: print(f"WORKER ERROR: {msg}"), Qt.QueuedConnection)

    thread.start()

    try:
        result = app.exec_()
    finally:
        cleanup()
        atexit.unregister(cleanup)

    return result


def main():
    """Main entry point."""
    args = parse_args()

    from tracking import load_config
    config = load_config(args.config)

    if args.camera is not None:
        config.camera.device_id = args.camera
    if args.no_mirror:
        config.camera.mirror = False
        config.gestures.mirror_x = True

    print("HandRunner starting...")
    print(f"  Camera: {config.camera.device_id} (mirror={config.camera.mirror})")
    print(f"  Detection interval: {config.loop.detection_interval_ms} ms")
    print(f"  Debug: {args.debug}")
    print()

    if args.debug:
        return run_debug(config)
    return run_headless(config)


if __name__ == "__main__":
    sys.exit(main())
