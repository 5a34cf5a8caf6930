"""
Hand landmark container shared by the tracker and the gesture engine.
"""
from dataclasses import dataclass
from typing import List, Sequence, Tuple

NUM_LANDMARKS = 21


@dataclass
class HandLandmarks:
    """
    Normalized landmarks of one tracked hand.

    Attributes:
        landmarks: List of 21 (x, y, z) tuples, x/y normalized 0-1
        handedness: 'Left', 'Right' or 'Unknown'
        confidence: Detection confidence 0-1
    """
    landmarks: List[Tuple[float, float, float]]
    handedness: str = "Unknown"
    confidence: float = 1.0

    # MediaPipe landmark indices
    WRIST = 0
    MIDDLE_MCP = 9

    @classmethod
    def from_points(cls, points: Sequence, handedness: str = "Unknown",
                    confidence: float = 1.0) -> "HandLandmarks":
        """
        Build from raw points.

        Args:
            points: 21 tuples (x, y[, z]) or objects with .x/.y[/.z]
                    attributes such as MediaPipe NormalizedLandmark.

        Raises:
            ValueError: If the hand does not have exactly 21 points.
        """
        if len(points) != NUM_LANDMARKS:
            raise ValueError(
                f"Expected {NUM_LANDMARKS} landmarks, got {len(points)}"
            )

        landmarks = []
        for p in points:
            if hasattr(p, "x"):
                landmarks.append((float(p.x), float(p.y), float(getattr(p, "z", 0.0))))
            else:
                z = p[2] if len(p) > 2 else 0.0
                landmarks.append((float(p[0]), float(p[1]), float(z)))
        return cls(landmarks=landmarks, handedness=handedness, confidence=confidence)

    @property
    def wrist(self) -> Tuple[float, float, float]:
        return self.landmarks[self.WRIST]

    @property
    def middle_mcp(self) -> Tuple[float, float, float]:
        return self.landmarks[self.MIDDLE_MCP]

    @property
    def tracked_point(self) -> Tuple[float, float]:
        """Hand reference point: midpoint of wrist and middle finger base."""
        wrist = self.wrist
        mcp = self.middle_mcp
        return ((wrist[0] + mcp[0]) / 2, (wrist[1] + mcp[1]) / 2)


# Hand connections for drawing (same as MediaPipe's HAND_CONNECTIONS)
HAND_CONNECTIONS = [
    (0, 1), (1, 2), (2, 3), (3, 4),      # Thumb
    (0, 5), (5, 6), (6, 7), (7, 8),      # Index
    (0, 9), (9, 10), (10, 11), (11, 12), # Middle
    (0, 13), (13, 14), (14, 15), (15, 16), # Ring
    (0, 17), (17, 18), (18, 19), (19, 20), # Pinky
    (5, 9), (9, 13), (13, 17),           # Palm
]
