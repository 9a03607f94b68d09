"""
Make vars generation pass.

This module runs every registered make vars provider once, collects the
variables they export, and writes them to make_vars<suffix>.mk for the legacy
Make build. The pass goes through these states:

    IDLE -> COLLECTING -> RENDERING -> WRITING -> DONE

It ends early in SKIPPED when the build is not embedded in Make, and in
ABORTED when the build has already failed before or after collection. An
aborted pass leaves any previous output untouched.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import List, Optional, Tuple

from .context import BuildContext, MakeVarsContext
from .registry import MakeVarsProviderRegistry, ProviderEntry
from .variable import MakeVarsVariable
from .writer import make_vars_file_name, render_make_vars, write_file_if_changed


class MakeVarsState(Enum):
    """State of a make vars pass."""

    IDLE = "idle"
    COLLECTING = "collecting"
    RENDERING = "rendering"
    WRITING = "writing"
    DONE = "done"
    SKIPPED = "skipped"
    ABORTED = "aborted"


@dataclass
class MakeVarsResult:
    """Result of a make vars pass."""

    state: MakeVarsState
    out_file: Optional[Path] = None
    vars: List[MakeVarsVariable] = field(default_factory=list)
    written: bool = False
    error: Optional[str] = None

    @property
    def success(self) -> bool:
        return self.state in (MakeVarsState.DONE, MakeVarsState.SKIPPED) and self.error is None


def collect_provider_vars(
    ctx: BuildContext,
    provider: ProviderEntry
) -> Tuple[MakeVarsVariable, ...]:
    """Run one provider through a fresh MakeVarsContext and return its variables."""
    mctx = MakeVarsContext(ctx, provider.namespace)
    provider.call(mctx)
    return mctx.vars


class MakeVarsSingleton:
    """
    Generates the make vars file from all registered providers.

    Example usage:
        registry = default_registry()
        singleton = MakeVarsSingleton(registry)
        result = singleton.generate_build_actions(build_ctx)
        if result.written:
            print(f"Updated {result.out_file}")
    """

    def __init__(self, registry: MakeVarsProviderRegistry, verbose: bool = False):
        """
        Initialize the pass.

        Args:
            registry: Providers to run, in registration order
            verbose: Print progress
        """
        self.registry = registry
        self.verbose = verbose
        self.state = MakeVarsState.IDLE

    def generate_build_actions(self, ctx: BuildContext) -> MakeVarsResult:
        """
        Run all providers and write the make vars file if it changed.

        Errors from providers and from writing the file are reported through
        ctx.errorf; nothing is raised.

        Args:
            ctx: Build context shared by all providers

        Returns:
            MakeVarsResult describing how the pass ended
        """
        self.state = MakeVarsState.IDLE
        config = ctx.config

        if not config.embedded_in_make:
            logging.debug("Not embedded in Make, skipping make vars")
            return self._finish(MakeVarsState.SKIPPED)

        out_file = config.path_for_output(make_vars_file_name(config.make_suffix))

        if ctx.failed():
            return self._finish(MakeVarsState.ABORTED, out_file)

        self.state = MakeVarsState.COLLECTING
        if self.verbose:
            print(f"Collecting make vars from {len(self.registry)} providers...")

        variables: List[MakeVarsVariable] = []
        for provider in self.registry:
            variables.extend(collect_provider_vars(ctx, provider))

        logging.info(f"Collected {len(variables)} make vars")

        if ctx.failed():
            return self._finish(MakeVarsState.ABORTED, out_file, variables)

        self.state = MakeVarsState.RENDERING
        out_bytes = render_make_vars(variables)

        self.state = MakeVarsState.WRITING
        try:
            written = write_file_if_changed(ctx.fs, out_file, out_bytes)
        except OSError as e:
            ctx.errorf("%s", str(e))
            return self._finish(MakeVarsState.DONE, out_file, variables, error=str(e))

        if self.verbose:
            if written:
                print(f"Wrote {out_file}")
            else:
                print(f"{out_file} is up to date")

        return self._finish(MakeVarsState.DONE, out_file, variables, written=written)

    def _finish(
        self,
        state: MakeVarsState,
        out_file: Optional[Path] = None,
        variables: Optional[List[MakeVarsVariable]] = None,
        written: bool = False,
        error: Optional[str] = None
    ) -> MakeVarsResult:
        self.state = state
        if state == MakeVarsState.ABORTED:
            logging.warning("Build already failed, not writing make vars")
        return MakeVarsResult(
            state=state,
            out_file=out_file,
            vars=list(variables or []),
            written=written,
            error=error
        )
