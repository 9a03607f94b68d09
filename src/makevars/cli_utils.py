"""CLI utility functions for Makevars.

This module provides common utilities used across CLI commands including:
- Config file discovery
- Parsing of NAME=VALUE definitions
- Error handling and formatting
"""

import sys
from pathlib import Path
from typing import Dict, List, Optional

CONFIG_FILE_NAME = "makevars.ini"


class ConfigLocator:
    """Finds the makevars.ini for a project."""

    @staticmethod
    def locate(project_dir: Path, config_path: Optional[Path] = None) -> Path:
        """Return the config file to use.

        Args:
            project_dir: Project directory
            config_path: Optional explicit config path (relative to project_dir)

        Returns:
            Path to the config file

        Raises:
            FileNotFoundError: If the config file doesn't exist
        """
        if config_path is not None:
            path = config_path if config_path.is_absolute() else project_dir / config_path
        else:
            path = project_dir / CONFIG_FILE_NAME

        if not path.exists():
            raise FileNotFoundError(f"{path.name} not found in {path.parent}")
        return path


class DefinitionParser:
    """Parses -D NAME=VALUE arguments."""

    @staticmethod
    def parse_definitions(definitions: List[str]) -> Dict[str, str]:
        """Parse NAME=VALUE strings into a dict.

        A bare NAME defines an empty value.

        Raises:
            ValueError: If a definition has an empty name
        """
        values = {}
        for definition in definitions:
            name, _, value = definition.partition("=")
            name = name.strip()
            if not name:
                raise ValueError(f"Invalid definition {definition!r}, expected NAME=VALUE")
            values[name] = value
        return values


class ErrorFormatter:
    """Formats and displays error messages with ANSI color codes."""

    # ANSI color codes
    RED = "\033[1;31m"
    GREEN = "\033[1;32m"
    YELLOW = "\033[1;33m"
    RESET = "\033[0m"

    @staticmethod
    def print_error(title: str, message: str) -> None:
        """Print formatted error message.

        Args:
            title: Error title (e.g., "Make vars failed")
            message: Error message details
        """
        print()
        print(f"{ErrorFormatter.RED}✗ {title}{ErrorFormatter.RESET}")
        print()
        print(message)
        print()

    @staticmethod
    def print_success(message: str) -> None:
        print()
        print(f"{ErrorFormatter.GREEN}✓ {message}{ErrorFormatter.RESET}")

    @staticmethod
    def print_warning(message: str) -> None:
        print(f"{ErrorFormatter.YELLOW}! {message}{ErrorFormatter.RESET}")

    @staticmethod
    def handle_file_not_found(error: FileNotFoundError) -> None:
        ErrorFormatter.print_error("Error: File not found", str(error))
        print(f"Make sure the project directory contains a {CONFIG_FILE_NAME} file.")
        sys.exit(1)

    @staticmethod
    def handle_permission_error(error: PermissionError) -> None:
        ErrorFormatter.print_error("Error: Permission denied", str(error))
        sys.exit(1)

    @staticmethod
    def handle_keyboard_interrupt() -> None:
        ErrorFormatter.print_warning("Interrupted")
        sys.exit(130)  # Standard exit code for SIGINT

    @staticmethod
    def handle_unexpected_error(error: Exception, verbose: bool = False) -> None:
        """Handle unexpected errors with standard formatting.

        Args:
            error: The exception to handle
            verbose: Whether to print traceback
        """
        message = f"{type(error).__name__}: {error}"
        ErrorFormatter.print_error("Unexpected error", message)

        if verbose:
            import traceback

            print("Traceback:")
            print(traceback.format_exc())

        sys.exit(1)


class PathValidator:
    """Validates project paths and directories."""

    @staticmethod
    def validate_project_dir(project_dir: Path) -> None:
        """Exit with status 2 unless project_dir is an existing directory."""
        if not project_dir.exists():
            print(
                f"{ErrorFormatter.RED}✗ Error: Path does not exist: {project_dir}{ErrorFormatter.RESET}"
            )
            sys.exit(2)
        if not project_dir.is_dir():
            print(
                f"{ErrorFormatter.RED}✗ Error: Path is not a directory: {project_dir}{ErrorFormatter.RESET}"
            )
            sys.exit(2)
