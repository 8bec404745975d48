"""Settings loading for ``kubemcp serve``."""

from __future__ import annotations

import os
from pathlib import Path  # noqa: TC003
from typing import Any

import yaml
from pydantic import ValidationError

from kubemcp.settings.errors import SettingsError
from kubemcp.settings.models import ServerSettings


class SettingsLoader:
    """Load and validate a YAML settings file into :class:`ServerSettings`."""

    def __init__(self, path: Path | None = None) -> None:
        self._path = path

    def load(self) -> ServerSettings:
        """Read YAML, interpolate env vars, and validate.

        Without a path the defaults are returned.  Environment variables
        in the form ``${VAR}`` or ``$VAR`` are expanded before parsing.

        Raises:
            SettingsError: On read errors, YAML parse errors, or schema
                validation failures.
        """
        if self._path is None:
            return ServerSettings()

        try:
            raw = self._path.read_text(encoding="utf-8")
        except OSError as exc:
            raise SettingsError(f"Cannot read {self._path}: {exc}") from exc

        expanded = os.path.expandvars(raw)

        try:
            data: Any = yaml.safe_load(expanded)
        except yaml.YAMLError as exc:
            raise SettingsError(f"YAML parse error: {exc}") from exc

        if data is None:
            return ServerSettings()
        if not isinstance(data, dict):
            raise SettingsError("Settings YAML must be a mapping")

        try:
            return ServerSettings.model_validate(data)
        except ValidationError as exc:
            raise SettingsError(str(exc)) from exc
