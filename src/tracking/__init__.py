"""
HandRunner Tracking Module

Hand gesture recognition for runner controls (lane swipes, jump, slide).
The camera-backed HandTracker and TrackingWorker live in .hand_tracker and
.worker and pull in MediaPipe and PyQt5.
"""
from .config import Config, GestureConfig, load_config
from .landmarks import HandLandmarks
from .gesture_recognizer import GestureRecognizer, GestureState, Gesture, Zone

__all__ = [
    'Config',
    'GestureConfig',
    'load_config',
    'HandLandmarks',
    'GestureRecognizer',
    'GestureState',
    'Gesture',
    'Zone',
]
