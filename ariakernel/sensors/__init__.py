"""Sensors: host keyboard, pointer and focus events in, kernel dispatches out."""

from .focus import FocusSensor
from .keyboard import KeyboardSensor, RawKeyEvent
from .pointer import PointerSensor

__all__ = ["FocusSensor", "KeyboardSensor", "PointerSensor", "RawKeyEvent"]
