"""
Command-line interface for Makevars.

This module provides the `makevars` CLI tool for exporting build variables
to a legacy Make build.
"""

import argparse
import logging
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from makevars import __version__
from makevars.build import (
    MakeVarsComponentFactory,
    MakeVarsSingleton,
    MakeVarsState,
    check_make_vars,
    collect_provider_vars,
)
from makevars.cli_utils import (
    ConfigLocator,
    DefinitionParser,
    ErrorFormatter,
    PathValidator,
)
from makevars.config import MakeVarsConfig, MakeVarsConfigError


@dataclass
class GenerateArgs:
    """Arguments for the generate command."""

    project_dir: Path
    config: Optional[Path] = None
    verbose: bool = False


@dataclass
class CheckArgs:
    """Arguments for the check command."""

    project_dir: Path
    config: Optional[Path] = None
    define: List[str] = field(default_factory=list)
    verbose: bool = False


def _load_config(project_dir: Path, config_path: Optional[Path]) -> MakeVarsConfig:
    ini_path = ConfigLocator.locate(project_dir, config_path)
    return MakeVarsConfig.from_ini(ini_path)


def generate_command(args: GenerateArgs) -> None:
    """Generate the make vars file.

    Examples:
        makevars generate                 # Use ./makevars.ini
        makevars generate path/to/tree    # Use path/to/tree/makevars.ini
        makevars generate -c product.ini  # Use a specific config
    """
    try:
        config = _load_config(args.project_dir, args.config)
        packages = MakeVarsComponentFactory.create_packages(config)
        ctx = MakeVarsComponentFactory.create_build_context(config, packages)
        registry = MakeVarsComponentFactory.create_registry(config, packages)

        singleton = MakeVarsSingleton(registry, verbose=args.verbose)
        result = singleton.generate_build_actions(ctx)

        if result.state == MakeVarsState.SKIPPED:
            print("Not embedded in Make, nothing to do")
            sys.exit(0)

        if ctx.failed() or not result.success:
            ErrorFormatter.print_error("Make vars failed!", "\n".join(ctx.errors))
            sys.exit(1)

        if result.written:
            ErrorFormatter.print_success(f"Wrote {len(result.vars)} variables to {result.out_file}")
        else:
            ErrorFormatter.print_success(f"{result.out_file} is up to date")
        sys.exit(0)

    except FileNotFoundError as e:
        ErrorFormatter.handle_file_not_found(e)
    except MakeVarsConfigError as e:
        ErrorFormatter.print_error("Invalid configuration", str(e))
        sys.exit(1)
    except PermissionError as e:
        ErrorFormatter.handle_permission_error(e)
    except KeyboardInterrupt:
        ErrorFormatter.handle_keyboard_interrupt()
    except Exception as e:
        ErrorFormatter.handle_unexpected_error(e, args.verbose)


def check_command(args: CheckArgs) -> None:
    """Preview how Make will compare the exported variables.

    Examples:
        makevars check -D PLATFORM_SDK_VERSION=34
        makevars check -D FOO=bar -D BAZ="a b"
    """
    try:
        legacy = DefinitionParser.parse_definitions(args.define)
        config = _load_config(args.project_dir, args.config)
        packages = MakeVarsComponentFactory.create_packages(config)
        ctx = MakeVarsComponentFactory.create_build_context(config, packages)
        registry = MakeVarsComponentFactory.create_registry(config, packages)

        variables = []
        for provider in registry:
            variables.extend(collect_provider_vars(ctx, provider))

        if ctx.failed():
            ErrorFormatter.print_error("Make vars failed!", "\n".join(ctx.errors))
            sys.exit(1)

        result = check_make_vars(variables, legacy)

        if args.verbose:
            for name in result.adopted:
                print(f"{name} := {result.values[name]}")

        for mismatch in result.warnings:
            for line in mismatch.warning_lines():
                ErrorFormatter.print_warning(line)

        if result.failed:
            ErrorFormatter.print_error("Soong variable check failed", result.error_message())
            sys.exit(1)

        ErrorFormatter.print_success(
            f"{len(variables)} variables checked, {len(result.warnings)} warnings"
        )
        sys.exit(0)

    except FileNotFoundError as e:
        ErrorFormatter.handle_file_not_found(e)
    except (MakeVarsConfigError, ValueError) as e:
        ErrorFormatter.print_error("Invalid configuration", str(e))
        sys.exit(1)
    except KeyboardInterrupt:
        ErrorFormatter.handle_keyboard_interrupt()
    except Exception as e:
        ErrorFormatter.handle_unexpected_error(e, args.verbose)


def main() -> None:
    """Makevars - export build variables to Make."""
    parser = argparse.ArgumentParser(
        prog="makevars",
        description="Makevars - export build variables to a legacy Make build",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"makevars {__version__}",
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    # Generate command
    generate_parser = subparsers.add_parser(
        "generate",
        help="Write the make vars file",
    )
    generate_parser.add_argument(
        "project_dir",
        nargs="?",
        type=Path,
        default=Path.cwd(),
        help="Project directory (default: current directory)",
    )
    generate_parser.add_argument(
        "-c",
        "--config",
        type=Path,
        default=None,
        help="Config file (default: makevars.ini in the project directory)",
    )
    generate_parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Show verbose output",
    )

    # Check command
    check_parser = subparsers.add_parser(
        "check",
        help="Compare exported variables against existing Make values",
    )
    check_parser.add_argument(
        "project_dir",
        nargs="?",
        type=Path,
        default=Path.cwd(),
        help="Project directory (default: current directory)",
    )
    check_parser.add_argument(
        "-c",
        "--config",
        type=Path,
        default=None,
        help="Config file (default: makevars.ini in the project directory)",
    )
    check_parser.add_argument(
        "-D",
        "--define",
        action="append",
        default=[],
        metavar="NAME=VALUE",
        help="Value Make already defines (repeatable)",
    )
    check_parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Show verbose output",
    )

    # Parse arguments
    parsed_args = parser.parse_args()

    # If no command specified, show help
    if not parsed_args.command:
        parser.print_help()
        sys.exit(0)

    logging.basicConfig(
        level=logging.DEBUG if parsed_args.verbose else logging.WARNING,
        format="%(levelname)s: %(message)s",
    )

    PathValidator.validate_project_dir(parsed_args.project_dir)

    # Execute command
    if parsed_args.command == "generate":
        generate_command(GenerateArgs(
            project_dir=parsed_args.project_dir,
            config=parsed_args.config,
            verbose=parsed_args.verbose,
        ))
    elif parsed_args.command == "check":
        check_command(CheckArgs(
            project_dir=parsed_args.project_dir,
            config=parsed_args.config,
            define=parsed_args.define,
            verbose=parsed_args.verbose,
        ))


if __name__ == "__main__":
    main()
