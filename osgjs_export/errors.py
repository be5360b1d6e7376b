"""Errors raised while encoding a scene graph."""

from __future__ import annotations


class StructuralError(Exception):
    """Raised when the scene graph violates an encoding invariant.

    The whole encode is aborted; no partial document is produced.

    Parameters
    ----------
    message:
        Description of the violated invariant.
    path:
        Names of the entities from the root down to the failing one.
    """

    def __init__(self, message: str, path: tuple[str, ...] = ()) -> None:
        self.message = message
        self.path = path
        if path:
            super().__init__(f"{message} (at {'/'.join(path)})")
        else:
            super().__init__(message)
