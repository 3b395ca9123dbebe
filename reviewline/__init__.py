"""
Reviewline - timeline export engine for video review annotations.

Turns time-coded review comments into NLE interchange documents: CMX 3600
EDL, a marker timeline XML, and a marker-import CSV, all built on one
frame-accurate non-drop-frame timecode model.
"""

__version__ = "0.1.0"
