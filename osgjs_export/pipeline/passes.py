"""Geometry passes run on a private copy of the graph before encoding."""

from __future__ import annotations

import abc
import copy
import logging

from osgjs_export.models.scene import Node
from osgjs_export.pipeline.options import ExportOptions

logger = logging.getLogger(__name__)


class GeometryPass(abc.ABC):
    """Base class for scene graph pre-processing passes."""

    @property
    @abc.abstractmethod
    def name(self) -> str:
        """Short pass identifier."""

    @abc.abstractmethod
    def apply(self, root: Node, options: ExportOptions) -> None:
        """Mutate the graph under *root* in place."""


class PreprocessPipeline:
    """Run the configured passes, gated by the export options.

    Parameters
    ----------
    wireframe:
        Wireframe expansion, run when ``enable_wireframe`` is set.
    tangent_space:
        Tangent/bitangent generation, run when ``generate_tangent_space``
        is set and wireframe is not.
    optimizer:
        Tri-strip / draw-array optimiser, always run when given.
    """

    def __init__(
        self,
        *,
        wireframe: GeometryPass | None = None,
        tangent_space: GeometryPass | None = None,
        optimizer: GeometryPass | None = None,
    ) -> None:
        self._wireframe = wireframe
        self._tangent_space = tangent_space
        self._optimizer = optimizer

    def selected(self, options: ExportOptions) -> list[GeometryPass]:
        """Return the passes *options* enable, in run order."""
        passes: list[GeometryPass] = []
        if options.enable_wireframe:
            if self._wireframe is not None:
                passes.append(self._wireframe)
            else:
                logger.warning("Wireframe requested but no wireframe pass configured")
        if options.generate_tangent_space and not options.enable_wireframe:
            if self._tangent_space is not None:
                passes.append(self._tangent_space)
            else:
                logger.warning("Tangent space requested but no tangent pass configured")
        if self._optimizer is not None:
            passes.append(self._optimizer)
        return passes

    def run(self, root: Node, options: ExportOptions) -> Node:
        """Return a processed deep copy of *root*; the input is left untouched."""
        model = copy.deepcopy(root)
        for geometry_pass in self.selected(options):
            logger.debug("Running pass %s", geometry_pass.name)
            geometry_pass.apply(model, options)
        return model
