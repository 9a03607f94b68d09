"""
makevars.ini configuration parser.

This module parses makevars.ini files into the pieces a make vars pass needs:
build settings, device settings, ninja packages, modules and the sections
that declare exported variables.

Example makevars.ini:
    [build]
    make_suffix = -aosp_arm
    out_dir = out/soong
    min_supported_sdk_version = 14

    [namespace:java]
    hostOut = out/host/linux-x86

    [strict:java]
    HOST_OUT = ${hostOut}

Values are not interpolated: '$' belongs to ninja syntax.
"""

import configparser
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Tuple


class MakeVarsConfigError(Exception):
    """Exception raised for makevars.ini configuration errors."""

    pass


# Export section kind -> (strict, sort, raw)
EXPORT_KINDS: Dict[str, Tuple[bool, bool, bool]] = {
    "strict": (True, False, False),
    "strict_sorted": (True, True, False),
    "strict_raw": (True, False, True),
    "check": (False, False, False),
    "check_sorted": (False, True, False),
    "check_raw": (False, False, True),
}


def _join_lines(value: str) -> str:
    return " ".join(line.strip() for line in value.splitlines() if line.strip())


@dataclass
class ExportSection:
    """Variables declared in one [<kind>:<namespace>] section."""

    kind: str
    namespace: str
    variables: List[Tuple[str, str]] = field(default_factory=list)


class MakeVarsIni:
    """
    Parser for makevars.ini files.

    Usage:
        ini = MakeVarsIni(Path("makevars.ini"))
        build = ini.get_section("build")
        for export in ini.get_exports():
            print(export.kind, export.namespace)
    """

    def __init__(self, ini_path: Path):
        """
        Initialize the parser with a makevars.ini file.

        Args:
            ini_path: Path to the makevars.ini file

        Raises:
            MakeVarsConfigError: If the file doesn't exist or cannot be parsed
        """
        self.ini_path = ini_path

        if not ini_path.exists():
            raise MakeVarsConfigError(f"Configuration file not found: {ini_path}")

        self.config = configparser.ConfigParser(interpolation=None)
        # Make variable names are case sensitive
        self.config.optionxform = str

        try:
            self.config.read(ini_path, encoding="utf-8")
        except configparser.Error as e:
            raise MakeVarsConfigError(f"Failed to parse {ini_path}: {e}") from e

        # [DEFAULT] keys leak into every section
        if self.config.defaults():
            raise MakeVarsConfigError(
                f"{ini_path}: [{self.config.default_section}] is not supported, "
                + "set values in the sections that use them"
            )

    def get_section(self, name: str) -> Dict[str, str]:
        """Return a section's key/value pairs, or an empty dict if it is missing.

        Multi-line values are joined into one line with single spaces, so
        PRODUCT_PACKAGES =
            a
            b
        reads as "a b".
        """
        if name not in self.config:
            return {}
        return {key: _join_lines(value) for key, value in self.config[name].items()}

    def _prefixed(self, prefix: str) -> List[Tuple[str, Dict[str, str]]]:
        sections = []
        for section in self.config.sections():
            if section.startswith(f"{prefix}:"):
                sections.append((section.split(":", 1)[1], self.get_section(section)))
        return sections

    def get_namespaces(self) -> List[Tuple[str, Dict[str, str]]]:
        """Return (name, variables) for every [namespace:<name>] section."""
        return self._prefixed("namespace")

    def get_modules(self) -> List[Tuple[str, Dict[str, str]]]:
        """Return (name, properties) for every [module:<name>] section."""
        return self._prefixed("module")

    def get_exports(self) -> List[ExportSection]:
        """
        Return export sections in file order.

        Raises:
            MakeVarsConfigError: If a section has no namespace
        """
        exports = []
        for section in self.config.sections():
            kind, sep, namespace = section.partition(":")
            if kind not in EXPORT_KINDS:
                continue
            if not sep or not namespace:
                raise MakeVarsConfigError(
                    f"Section [{section}] must name a namespace, e.g. [{kind}:android]"
                )
            exports.append(ExportSection(
                kind=kind,
                namespace=namespace,
                variables=list(self.get_section(section).items())
            ))
        return exports
