import pytest
from src.tracking.config import GestureConfig
from src.tracking.gesture_recognizer import GestureRecognizer


@pytest.fixture
def recognizer():
    return GestureRecognizer(GestureConfig())
