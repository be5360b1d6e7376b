"""Abstract Exporter interface and the result every export returns."""

from __future__ import annotations

import abc
import io
from dataclasses import dataclass
from pathlib import Path
from typing import Any, TextIO

from osgjs_export.models.scene import Node


@dataclass
class ExportResult:
    """Result of an export operation."""

    file_path: Path | None
    format: str
    success: bool = True
    message: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "file_path": str(self.file_path) if self.file_path else None,
            "format": self.format,
            "success": self.success,
            "message": self.message,
        }


class Exporter(abc.ABC):
    """Base class for scene graph exporters."""

    @property
    @abc.abstractmethod
    def format_name(self) -> str:
        """Short format identifier (e.g., 'osgjs')."""

    @abc.abstractmethod
    def write(self, root: Node, stream: TextIO) -> ExportResult:
        """Encode the graph under *root* and write it to *stream*.

        Parameters
        ----------
        root:
            Root of the scene graph to export. Never mutated.
        stream:
            Text stream receiving the document.

        Returns
        -------
        ExportResult
            ``success`` is False when the graph could not be encoded; nothing
            is written in that case.
        """

    def export(self, root: Node, output_path: str | Path) -> ExportResult:
        """Export to a file, creating parent directories as needed.

        The file is only written after a successful encode; a failed export
        leaves any existing file at *output_path* untouched.
        """
        path = Path(output_path)
        buffer = io.StringIO()
        result = self.write(root, buffer)
        if not result.success:
            return result

        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(buffer.getvalue(), encoding="utf-8")
        result.file_path = path
        return result
