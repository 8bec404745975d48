"""Server settings — pydantic models and the YAML loader."""

from kubemcp.settings.errors import SettingsError
from kubemcp.settings.loader import SettingsLoader
from kubemcp.settings.models import (
    ProcessSettings,
    ProgramSettings,
    ServerInfo,
    ServerSettings,
    TelemetrySettings,
    TransportSettings,
)

__all__ = [
    "ProcessSettings",
    "ProgramSettings",
    "ServerInfo",
    "ServerSettings",
    "SettingsError",
    "SettingsLoader",
    "TelemetrySettings",
    "TransportSettings",
]
