"""Capture, view and drive the screen of an ADB-attached Android device."""

__version__ = "1.0.0"
