"""osgjs-export — encode in-memory scene graphs as osgjs JSON documents."""

__version__ = "1.0.0"

from osgjs_export.document.model import DocArray, DocBuffer, DocObject, DocValue
from osgjs_export.document.writer import to_plain
from osgjs_export.encoding.traversal import WriteVisitor, encode
from osgjs_export.errors import StructuralError
from osgjs_export.exporters.base import ExportResult, Exporter
from osgjs_export.exporters.osgjs import OSGJSExporter
from osgjs_export.pipeline.options import ExportOptions, OptionsLoader
from osgjs_export.pipeline.passes import GeometryPass, PreprocessPipeline

__all__ = [
    "__version__",
    # Encoding
    "WriteVisitor",
    "encode",
    "StructuralError",
    # Document
    "DocArray",
    "DocBuffer",
    "DocObject",
    "DocValue",
    "to_plain",
    # Export
    "ExportOptions",
    "ExportResult",
    "Exporter",
    "GeometryPass",
    "OSGJSExporter",
    "OptionsLoader",
    "PreprocessPipeline",
]
