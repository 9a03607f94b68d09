"""Configuration parsing modules for Makevars."""

from .build_config import DeviceConfig, MakeVarsConfig
from .ini_parser import EXPORT_KINDS, ExportSection, MakeVarsConfigError, MakeVarsIni

__all__ = [
    "MakeVarsConfig",
    "DeviceConfig",
    "MakeVarsIni",
    "MakeVarsConfigError",
    "ExportSection",
    "EXPORT_KINDS",
]
