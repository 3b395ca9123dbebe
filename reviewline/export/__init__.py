"""
reviewline.export - Timeline export.

Generates NLE interchange documents from review annotations:
- EDL (CMX 3600) - universal cut list, one event per annotation
- Timeline XML - one escaped marker per annotation
- CSV - marker-import spreadsheet
"""

from __future__ import annotations

from reviewline.export.service import ExportDocument, ExportFormat, export_annotations

__all__ = ["ExportDocument", "ExportFormat", "export_annotations"]
