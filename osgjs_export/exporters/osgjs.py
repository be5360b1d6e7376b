"""osgjs exporter — copy, pre-process, encode and write a scene graph."""

from __future__ import annotations

import logging
from typing import TextIO

from osgjs_export.config import GENERATOR
from osgjs_export.document import writer
from osgjs_export.encoding.traversal import WriteVisitor
from osgjs_export.errors import StructuralError
from osgjs_export.exporters.base import ExportResult, Exporter
from osgjs_export.models.scene import Node
from osgjs_export.pipeline.options import ExportOptions
from osgjs_export.pipeline.passes import PreprocessPipeline

logger = logging.getLogger(__name__)


class OSGJSExporter(Exporter):
    """Export a scene graph as an osgjs JSON document.

    The caller's graph is deep-copied before any pass runs. The whole
    document is built in memory and only written once encoding succeeded.

    Parameters
    ----------
    options:
        Switches for the pre-processing passes.
    pipeline:
        Passes to run before encoding. Defaults to none.
    generator:
        Value of the document's ``Generator`` key.
    indent:
        JSON indentation; None writes a single line.
    """

    def __init__(
        self,
        options: ExportOptions | None = None,
        *,
        pipeline: PreprocessPipeline | None = None,
        generator: str = GENERATOR,
        indent: int | None = 2,
    ) -> None:
        self.options = options or ExportOptions()
        self._pipeline = pipeline or PreprocessPipeline()
        self._generator = generator
        self._indent = indent

    @property
    def format_name(self) -> str:
        return "osgjs"

    def write(self, root: Node, stream: TextIO) -> ExportResult:
        model = self._pipeline.run(root, self.options)

        try:
            document = WriteVisitor(generator=self._generator).encode(model)
            text = writer.dumps(document, indent=self._indent)
        except StructuralError as exc:
            logger.critical("can't save osgjs file: %s", exc)
            return ExportResult(
                file_path=None,
                format=self.format_name,
                success=False,
                message=f"Unable to encode scene graph: {exc}",
            )

        stream.write(text + "\n")
        return ExportResult(
            file_path=None,
            format=self.format_name,
            message="osgjs document exported successfully.",
        )
