"""Exporters turning a scene graph into a document file."""

from osgjs_export.exporters.base import ExportResult, Exporter
from osgjs_export.exporters.osgjs import OSGJSExporter

__all__ = [
    "ExportResult",
    "Exporter",
    "OSGJSExporter",
]
