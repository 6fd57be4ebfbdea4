"""Capture a manual task and turn it into an editable skill package."""

__version__ = "0.1.0"
