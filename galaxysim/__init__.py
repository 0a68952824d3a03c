"""Disk galaxy N-body simulation, camera and bloom helpers, rectangle packing and text editing."""

__version__ = "0.1.0"