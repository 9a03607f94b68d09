"""
Build configuration for the make vars pass.

MakeVarsConfig holds the global [build] settings and DeviceConfig the
per-target [device] settings from makevars.ini.
"""

from pathlib import Path
from typing import Dict, List, Optional

from .ini_parser import ExportSection, MakeVarsConfigError, MakeVarsIni

DEFAULT_OUT_DIR = "out/soong"
DEFAULT_MIN_SUPPORTED_SDK_VERSION = 14

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


def _parse_bool(key: str, value: str) -> bool:
    lowered = value.lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    raise MakeVarsConfigError(f"Invalid boolean for {key}: {value!r}")


class DeviceConfig:
    """Per-target configuration values."""

    def __init__(self, values: Optional[Dict[str, str]] = None):
        self.values = dict(values or {})

    def get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        return self.values.get(key, default)


class MakeVarsConfig:
    """
    Global build configuration.

    Usage:
        # Load from makevars.ini
        config = MakeVarsConfig.from_ini(Path("makevars.ini"))

        # Or create directly
        config = MakeVarsConfig(out_dir=Path("out/soong"), make_suffix="-aosp_arm")
        out_file = config.path_for_output("make_vars-aosp_arm.mk")
    """

    def __init__(
        self,
        out_dir: Path = Path(DEFAULT_OUT_DIR),
        make_suffix: str = "",
        embedded_in_make: bool = True,
        min_supported_sdk_version: int = DEFAULT_MIN_SUPPORTED_SDK_VERSION,
        source_dir: Path = Path("."),
        device_config: Optional[DeviceConfig] = None,
        values: Optional[Dict[str, str]] = None,
        namespaces: Optional[Dict[str, Dict[str, str]]] = None,
        modules: Optional[Dict[str, Dict[str, str]]] = None,
        exports: Optional[List[ExportSection]] = None,
    ):
        """
        Initialize build configuration.

        Args:
            out_dir: Directory generated files are written to
            make_suffix: Suffix of the make vars file name (e.g., "-aosp_arm")
            embedded_in_make: Whether this build feeds a Make build at all
            min_supported_sdk_version: Lowest SDK version apps may target
            source_dir: Root that glob patterns are relative to
            device_config: Per-target settings
            values: Raw [build] settings, for free-form lookups
            namespaces: Ninja package variables by package name
            modules: Module properties by module name
            exports: Variables declared in makevars.ini, in file order
        """
        self.out_dir = Path(out_dir)
        self.make_suffix = make_suffix
        self.embedded_in_make = embedded_in_make
        self.min_supported_sdk_version = min_supported_sdk_version
        self.source_dir = Path(source_dir)
        self.device_config = device_config or DeviceConfig()
        self.values = dict(values or {})
        self.namespaces = dict(namespaces or {})
        self.modules = dict(modules or {})
        self.exports = list(exports or [])

    def get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        """Look up a raw [build] setting."""
        return self.values.get(key, default)

    def path_for_output(self, *parts: str) -> Path:
        """Return a path inside the output directory."""
        return self.out_dir.joinpath(*parts)

    @classmethod
    def from_ini(cls, ini_path: Path) -> "MakeVarsConfig":
        """
        Load configuration from a makevars.ini file.

        Relative out_dir and source_dir are resolved against the directory
        containing the file.

        Args:
            ini_path: Path to makevars.ini

        Returns:
            MakeVarsConfig instance

        Raises:
            MakeVarsConfigError: If the file is missing or has invalid values
        """
        ini = MakeVarsIni(ini_path)
        base_dir = ini_path.parent
        build = ini.get_section("build")

        embedded = _parse_bool("embedded_in_make", build.get("embedded_in_make", "true"))

        sdk_str = build.get("min_supported_sdk_version", str(DEFAULT_MIN_SUPPORTED_SDK_VERSION))
        try:
            min_sdk = int(sdk_str)
        except ValueError as e:
            raise MakeVarsConfigError(
                f"min_supported_sdk_version must be an integer, got {sdk_str!r}"
            ) from e

        return cls(
            out_dir=base_dir / build.get("out_dir", DEFAULT_OUT_DIR),
            make_suffix=build.get("make_suffix", ""),
            embedded_in_make=embedded,
            min_supported_sdk_version=min_sdk,
            source_dir=base_dir / build.get("source_dir", "."),
            device_config=DeviceConfig(ini.get_section("device")),
            values=build,
            namespaces=dict(ini.get_namespaces()),
            modules=dict(ini.get_modules()),
            exports=ini.get_exports(),
        )
