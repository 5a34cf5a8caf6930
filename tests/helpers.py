from src.tracking.landmarks import HandLandmarks


def make_hand(x, y):
    """Hand whose tracked point (wrist / middle MCP midpoint) is (x, y)."""
    return HandLandmarks(landmarks=[(x, y, 0.0)] * 21, handedness="Right")


def feed(recognizer, samples):
    """Feed (t_ms, x, y) samples; returns the gesture of each frame."""
    return [recognizer.analyze(make_hand(x, y), t) for t, x, y in samples]
