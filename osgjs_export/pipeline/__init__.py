"""Export options and the pre-processing pass pipeline."""

from osgjs_export.pipeline.options import ExportOptions, OptionsLoader
from osgjs_export.pipeline.passes import GeometryPass, PreprocessPipeline

__all__ = [
    "ExportOptions",
    "GeometryPass",
    "OptionsLoader",
    "PreprocessPipeline",
]
