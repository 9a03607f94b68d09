"""In-process build context for running the make vars pass standalone.

SimpleBuildContext provides what MakeVarsContext forwards to: configuration,
a fixed module list, error tracking, globbing and ninja string evaluation
against PackageContext variables.

Supported ninja string syntax:
    $name, ${name}    variable from the evaluating package
    ${pkg.name}       variable from another registered package
    $$, $ , $:, $\\n   escapes, kept as-is in the result
"""

import fnmatch
import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence

from .context import BuildContext, EvalError, PackageContext
from .fs import OsFileSystem

_SIMPLE_NAME = re.compile(r"[a-zA-Z0-9_-]+")
_BRACED_NAME = re.compile(r"\{([a-zA-Z0-9_.-]+)\}")


@dataclass
class Module:
    """A build module known to the build graph."""

    name: str
    dir: str = ""
    sub_dir: str = ""
    type: str = ""
    blueprint_file: str = ""


class NinjaStringEvaluator:
    """Expands variable references in ninja strings."""

    def __init__(self, packages: Dict[str, PackageContext]):
        self.packages = packages

    def eval(self, namespace: PackageContext, ninja_str: str) -> str:
        return self._expand(namespace, ninja_str, [])

    def _lookup(self, namespace: PackageContext, ref: str, stack: List[str]) -> str:
        if "." in ref:
            pkg_name, var_name = ref.split(".", 1)
            package = self.packages.get(pkg_name)
            if package is None:
                raise EvalError(f"unknown package {pkg_name!r} in ${{{ref}}}")
        else:
            package, var_name = namespace, ref

        if var_name not in package.variables:
            raise EvalError(f"undefined variable ${{{ref}}} in package {package.name!r}")

        key = f"{package.name}.{var_name}"
        if key in stack:
            raise EvalError(f"variable cycle: {' -> '.join(stack + [key])}")
        return self._expand(package, package.variables[var_name], stack + [key])

    def _expand(self, namespace: PackageContext, ninja_str: str, stack: List[str]) -> str:
        out = []
        i = 0
        while i < len(ninja_str):
            c = ninja_str[i]
            if c != "$":
                out.append(c)
                i += 1
                continue

            if i + 1 >= len(ninja_str):
                raise EvalError(f"unexpected end of string after '$' in {ninja_str!r}")

            nxt = ninja_str[i + 1]
            if nxt in "$ :\n":
                out.append(ninja_str[i:i + 2])
                i += 2
                continue

            braced = _BRACED_NAME.match(ninja_str, i + 1)
            if braced:
                out.append(self._lookup(namespace, braced.group(1), stack))
                i = braced.end()
                continue

            simple = _SIMPLE_NAME.match(ninja_str, i + 1)
            if simple:
                out.append(self._lookup(namespace, simple.group(0), stack))
                i = simple.end()
                continue

            raise EvalError(f"invalid $ escape at offset {i} in {ninja_str!r}")
        return "".join(out)


class SimpleBuildContext(BuildContext):
    """
    Build context backed by configuration and a fixed module list.

    Example usage:
        ctx = SimpleBuildContext(config, packages=[pctx], modules=[Module("libfoo")])
        result = MakeVarsSingleton(registry).generate_build_actions(ctx)
        if ctx.failed():
            print("\\n".join(ctx.errors))
    """

    def __init__(
        self,
        config: Any,
        packages: Iterable[PackageContext] = (),
        modules: Iterable[Any] = (),
        fs: Optional[OsFileSystem] = None
    ):
        """
        Initialize build context.

        Args:
            config: MakeVarsConfig (or compatible) for this build
            packages: Packages reachable through ${pkg.var} references
            modules: Modules visited by visit_all_modules
            fs: Filesystem (default: OsFileSystem)
        """
        self._config = config
        self._fs = fs or OsFileSystem()
        self._modules = list(modules)
        self._evaluator = NinjaStringEvaluator({p.name: p for p in packages})
        self.errors: List[str] = []
        self.ninja_file_deps: List[str] = []

    @property
    def config(self) -> Any:
        return self._config

    @property
    def device_config(self) -> Any:
        return self._config.device_config

    @property
    def fs(self) -> OsFileSystem:
        return self._fs

    def eval(self, namespace: PackageContext, ninja_str: str) -> str:
        return self._evaluator.eval(namespace, ninja_str)

    def glob_with_deps(self, pattern: str, excludes: Sequence[str] = ()) -> List[str]:
        """List files under the source directory matching pattern.

        Args:
            pattern: Glob relative to the source directory (e.g. "src/**/*.mk")
            excludes: Glob patterns; matching files are dropped

        Returns:
            Sorted relative paths using forward slashes
        """
        root = Path(self._config.source_dir)
        matches = []
        for path in self._fs.glob(root, pattern):
            rel = path.relative_to(root).as_posix()
            if any(fnmatch.fnmatch(rel, exclude) for exclude in excludes):
                continue
            matches.append(rel)
        self.add_ninja_file_deps(pattern)
        return matches

    def add_ninja_file_deps(self, *deps: str) -> None:
        self.ninja_file_deps.extend(deps)

    def module_name(self, module: Module) -> str:
        return module.name

    def module_dir(self, module: Module) -> str:
        return module.dir

    def module_sub_dir(self, module: Module) -> str:
        return module.sub_dir

    def module_type(self, module: Module) -> str:
        return module.type

    def blueprint_file(self, module: Module) -> str:
        return module.blueprint_file

    def module_errorf(self, module: Module, fmt: str, *args: Any) -> None:
        message = fmt % args if args else fmt
        self.errorf("%s", f"{module.blueprint_file or module.dir}: {module.name}: {message}")

    def errorf(self, fmt: str, *args: Any) -> None:
        message = fmt % args if args else fmt
        logging.error(message)
        self.errors.append(message)

    def failed(self) -> bool:
        return bool(self.errors)

    def visit_all_modules(self, visit: Callable[[Any], None]) -> None:
        for module in self._modules:
            visit(module)

    def visit_all_modules_if(
        self,
        pred: Callable[[Any], bool],
        visit: Callable[[Any], None]
    ) -> None:
        for module in self._modules:
            if pred(module):
                visit(module)
