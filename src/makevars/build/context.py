"""Make variable export context.

This module defines the narrow collaborator interface the bridge needs from the
build graph (BuildContext) and the context handed to each make vars provider
(MakeVarsContext).

Design:
    - MakeVarsContext holds a BuildContext and forwards to it explicitly
    - Each provider invocation gets a fresh MakeVarsContext
    - Evaluation failures are reported through errorf, never raised to callers
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Sequence, Tuple

from .variable import MakeVarsVariable


class EvalError(Exception):
    """Raised when a ninja string cannot be evaluated."""
    pass


@dataclass
class PackageContext:
    """Namespace that ninja strings are evaluated against.

    Attributes:
        name: Package name, used for qualified ${pkg.var} references
        variables: Variables defined in this package
    """

    name: str
    variables: Dict[str, str] = field(default_factory=dict)


class BuildContext(ABC):
    """Capabilities the bridge consumes from the surrounding build graph."""

    @property
    @abstractmethod
    def config(self) -> Any:
        """Global build configuration."""

    @property
    @abstractmethod
    def device_config(self) -> Any:
        """Per-target configuration."""

    @property
    @abstractmethod
    def fs(self) -> Any:
        """Filesystem abstraction."""

    @abstractmethod
    def eval(self, namespace: PackageContext, ninja_str: str) -> str:
        """Expand a ninja string. Result is still ninja-escaped.

        Raises:
            EvalError: If a reference cannot be resolved
        """

    @abstractmethod
    def glob_with_deps(self, pattern: str, excludes: Sequence[str]) -> List[str]:
        """List files matching pattern but none of excludes, tracking deps."""

    @abstractmethod
    def add_ninja_file_deps(self, *deps: str) -> None:
        """Rerun the pass when any of deps change."""

    @abstractmethod
    def module_name(self, module: Any) -> str:
        ...

    @abstractmethod
    def module_dir(self, module: Any) -> str:
        ...

    @abstractmethod
    def module_sub_dir(self, module: Any) -> str:
        ...

    @abstractmethod
    def module_type(self, module: Any) -> str:
        ...

    @abstractmethod
    def blueprint_file(self, module: Any) -> str:
        ...

    @abstractmethod
    def module_errorf(self, module: Any, fmt: str, *args: Any) -> None:
        ...

    @abstractmethod
    def errorf(self, fmt: str, *args: Any) -> None:
        ...

    @abstractmethod
    def failed(self) -> bool:
        """Return True once any error has been reported for this build."""

    @abstractmethod
    def visit_all_modules(self, visit: Callable[[Any], None]) -> None:
        ...

    @abstractmethod
    def visit_all_modules_if(
        self,
        pred: Callable[[Any], bool],
        visit: Callable[[Any], None]
    ) -> None:
        ...


def descape_ninja(value: str) -> str:
    """Turn a ninja-escaped string into one usable in a Makefile.

    Example:
        >>> descape_ninja('$$(HOST_OUT)')
        '$(HOST_OUT)'
    """
    return value.replace("$$", "$")


class MakeVarsContext:
    """Context passed to make vars providers.

    Providers call strict()/check() and their variants to export variables.
    Everything else is forwarded unchanged to the underlying BuildContext.

    Example usage:
        def provider(ctx):
            ctx.strict("HOST_OUT", "${hostOut}")
            ctx.check_sorted("PRODUCT_PACKAGES", "${packages}")
    """

    def __init__(self, build_ctx: BuildContext, namespace: PackageContext):
        """Initialize context for one provider invocation.

        Args:
            build_ctx: Shared build graph context
            namespace: Package the provider's ninja strings are evaluated in
        """
        self._build_ctx = build_ctx
        self.namespace = namespace
        self._vars: List[MakeVarsVariable] = []

    @property
    def vars(self) -> Tuple[MakeVarsVariable, ...]:
        """Variables exported so far, in call order."""
        return tuple(self._vars)

    # Forwarded build context capabilities

    @property
    def config(self) -> Any:
        return self._build_ctx.config

    @property
    def device_config(self) -> Any:
        return self._build_ctx.device_config

    @property
    def fs(self) -> Any:
        return self._build_ctx.fs

    def add_ninja_file_deps(self, *deps: str) -> None:
        self._build_ctx.add_ninja_file_deps(*deps)

    def glob_with_deps(self, pattern: str, excludes: Sequence[str] = ()) -> List[str]:
        """List files matching pattern, excluding any matching excludes.

        The pass is rerun when a matching file is added or removed.
        """
        return self._build_ctx.glob_with_deps(pattern, excludes)

    def module_name(self, module: Any) -> str:
        return self._build_ctx.module_name(module)

    def module_dir(self, module: Any) -> str:
        return self._build_ctx.module_dir(module)

    def module_sub_dir(self, module: Any) -> str:
        return self._build_ctx.module_sub_dir(module)

    def module_type(self, module: Any) -> str:
        return self._build_ctx.module_type(module)

    def blueprint_file(self, module: Any) -> str:
        return self._build_ctx.blueprint_file(module)

    def module_errorf(self, module: Any, fmt: str, *args: Any) -> None:
        self._build_ctx.module_errorf(module, fmt, *args)

    def errorf(self, fmt: str, *args: Any) -> None:
        self._build_ctx.errorf(fmt, *args)

    def failed(self) -> bool:
        return self._build_ctx.failed()

    def visit_all_modules(self, visit: Callable[[Any], None]) -> None:
        self._build_ctx.visit_all_modules(visit)

    def visit_all_modules_if(
        self,
        pred: Callable[[Any], bool],
        visit: Callable[[Any], None]
    ) -> None:
        self._build_ctx.visit_all_modules_if(pred, visit)

    # Evaluation

    def eval(self, ninja_str: str) -> str:
        """Evaluate a ninja string into a value usable in a Makefile.

        Use this when a provider needs to modify a value before handing it
        to strict_raw()/check_raw().

        Args:
            ninja_str: String with ninja variable references

        Returns:
            Expanded string with $$ de-escaped to $

        Raises:
            EvalError: If the string cannot be evaluated
        """
        return descape_ninja(self._build_ctx.eval(self.namespace, ninja_str))

    # Export operations

    def _add_variable_raw(self, name: str, value: str, strict: bool, sort: bool) -> None:
        if not name:
            self._build_ctx.errorf("make variable name must not be empty (value %r)", value)
            return
        self._vars.append(MakeVarsVariable(
            name=name,
            value=value,
            strict=strict,
            sort=sort
        ))

    def _add_variable(self, name: str, ninja_str: str, strict: bool, sort: bool) -> None:
        try:
            value = self.eval(ninja_str)
        except EvalError as e:
            self._build_ctx.errorf("%s", str(e))
            value = ""
        self._add_variable_raw(name, value, strict, sort)

    def strict(self, name: str, ninja_str: str) -> None:
        """Export a variable that must match Make, failing the build if not.

        If the Make variable is empty, it is just set.
        """
        self._add_variable(name, ninja_str, True, False)

    def strict_sorted(self, name: str, ninja_str: str) -> None:
        """Like strict(), but compares sorted lists and shows only differences."""
        self._add_variable(name, ninja_str, True, True)

    def strict_raw(self, name: str, value: str) -> None:
        """Like strict(), for a value that is already evaluated."""
        self._add_variable_raw(name, value, True, False)

    def check(self, name: str, ninja_str: str) -> None:
        """Export a variable that should match Make, warning if not.

        If the Make variable is empty, it is just set.
        """
        self._add_variable(name, ninja_str, False, False)

    def check_sorted(self, name: str, ninja_str: str) -> None:
        """Like check(), but compares sorted lists and shows only differences."""
        self._add_variable(name, ninja_str, False, True)

    def check_raw(self, name: str, value: str) -> None:
        """Like check(), for a value that is already evaluated."""
        self._add_variable_raw(name, value, False, False)
