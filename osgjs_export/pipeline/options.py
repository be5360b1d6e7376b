"""Export options and where they are loaded from."""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, ValidationError

logger = logging.getLogger(__name__)

# Option-string flag names mapped to their field
_FLAG_OPTIONS: dict[str, str] = {
    "generateTangentSpace": "generate_tangent_space",
    "buildTangentSpace": "generate_tangent_space",
    "disableTriStrip": "disable_tri_strip",
    "disableMergeTriStrip": "disable_merge_tri_strip",
    "useDrawArray": "use_draw_array",
    "enableWireframe": "enable_wireframe",
}

# Option-string ``name=<int>`` options mapped to their field
_INT_OPTIONS: dict[str, str] = {
    "tangentSpaceTextureUnit": "tangent_space_texture_unit",
    "buildTangentSpaceTexUnit": "tangent_space_texture_unit",
    "triStripCacheSize": "tri_strip_cache_size",
}

OPTIONS_FILE = "osgjs.json"
OPTIONS_ENV = "OSGJS_OPTIONS"
LOG_LEVEL_ENV = "OSGJS_LOG_LEVEL"
PACKAGE_LOGGER = "osgjs_export"


class ExportOptions(BaseModel):
    """Options consumed by the pre-processing passes.

    The encoder itself reads none of them.
    """

    generate_tangent_space: bool = False
    tangent_space_texture_unit: int = Field(default=0, ge=0, lt=32)
    disable_tri_strip: bool = False
    disable_merge_tri_strip: bool = False
    tri_strip_cache_size: int = Field(default=16, ge=1)
    use_draw_array: bool = False
    enable_wireframe: bool = False

    @classmethod
    def from_option_string(cls, options: str, base: ExportOptions | None = None) -> ExportOptions:
        """Parse a whitespace-separated plugin option string.

        ``"generateTangentSpace triStripCacheSize=32"``. Unknown options are
        ignored; malformed or out-of-range integers keep the current value.
        """
        values: dict[str, Any] = (base or cls()).model_dump()
        for token in options.split():
            name, _, raw = token.partition("=")
            if name in _FLAG_OPTIONS:
                values[_FLAG_OPTIONS[name]] = True
            elif name in _INT_OPTIONS:
                if not raw:
                    logger.debug("Option %s needs a value, ignoring", name)
                    continue
                field = _INT_OPTIONS[name]
                try:
                    number = int(raw)
                except ValueError:
                    logger.warning("Option %s=%s is not an integer, ignoring", name, raw)
                    continue
                try:
                    cls.model_validate({**values, field: number})
                except ValidationError as exc:
                    logger.warning(
                        "Option %s=%s out of range, keeping %s: %s",
                        name, raw, values[field], exc.errors()[0]["msg"],
                    )
                    continue
                values[field] = number
            else:
                logger.debug("Unknown option %r, ignoring", token)
        return cls.model_validate(values)

    @classmethod
    def field_for(cls, key: str) -> str | None:
        """Map a field name or plugin option name to its field, or None."""
        if key in cls.model_fields:
            return key
        return _FLAG_OPTIONS.get(key) or _INT_OPTIONS.get(key)


class OptionsLoader:
    """Resolve export options and log level for a project directory."""

    def load(self, project_path: str | Path = ".") -> ExportOptions:
        """Merge defaults -> osgjs.json -> $OSGJS_OPTIONS -> $OSGJS_LOG_LEVEL.

        ``osgjs.json`` keys may be field names (``tri_strip_cache_size``) or
        plugin option names (``triStripCacheSize``). A file whose values do
        not validate is ignored as a whole.

        Returns the resulting ExportOptions.
        """
        root = Path(project_path)
        values: dict[str, Any] = {}

        # 1. osgjs.json
        options_file = root / OPTIONS_FILE
        if options_file.is_file():
            try:
                data = json.loads(options_file.read_text(encoding="utf-8"))
                if isinstance(data, dict):
                    for key, value in data.items():
                        field = ExportOptions.field_for(key)
                        if field is None:
                            logger.debug("Unknown key %r in %s, ignoring", key, options_file)
                            continue
                        values[field] = value
            except (json.JSONDecodeError, OSError):
                logger.debug("Could not read %s", options_file, exc_info=True)

        try:
            options = ExportOptions.model_validate(values)
        except ValidationError as exc:
            logger.warning("Ignoring invalid %s: %s", options_file, exc)
            options = ExportOptions()

        # 2. Environment option string overrides the file
        env_val = os.environ.get(OPTIONS_ENV)
        if env_val:
            options = ExportOptions.from_option_string(env_val, base=options)

        # 3. Log level of the package loggers
        if os.environ.get(LOG_LEVEL_ENV):
            logging.getLogger(PACKAGE_LOGGER).setLevel(self.log_level())

        return options

    def log_level(self, default: str = "WARNING") -> int:
        """Return the numeric level named by $OSGJS_LOG_LEVEL."""
        name = os.environ.get(LOG_LEVEL_ENV, default).upper()
        level = logging.getLevelName(name)
        if not isinstance(level, int):
            logger.debug("Unknown log level %r, using %s", name, default)
            level = logging.getLevelName(default.upper())
        return level
