"""
Make vars export components for Makevars.

This module provides:
- Provider registration
- The context providers export variables through
- Rendering and writing of the make vars file
- A preview of the checks Make performs on the exported variables
"""

from .build_component_factory import ExportSectionProvider, MakeVarsComponentFactory
from .compare import CheckResult, VarMismatch, check_make_vars, compare_make_var
from .context import BuildContext, EvalError, MakeVarsContext, PackageContext
from .fs import OsFileSystem
from .registry import (
    DEFAULT_NAMESPACE,
    MakeVarsError,
    MakeVarsProviderRegistry,
    ProviderEntry,
    default_registry,
    singleton_make_vars_provider_adapter,
)
from .simple_context import Module, NinjaStringEvaluator, SimpleBuildContext
from .singleton import MakeVarsResult, MakeVarsSingleton, MakeVarsState, collect_provider_vars
from .variable import MakeVarsVariable
from .writer import make_vars_file_name, render_make_vars, write_file_if_changed

__all__ = [
    'BuildContext',
    'CheckResult',
    'DEFAULT_NAMESPACE',
    'EvalError',
    'ExportSectionProvider',
    'MakeVarsComponentFactory',
    'MakeVarsContext',
    'MakeVarsError',
    'MakeVarsProviderRegistry',
    'MakeVarsResult',
    'MakeVarsSingleton',
    'MakeVarsState',
    'MakeVarsVariable',
    'Module',
    'NinjaStringEvaluator',
    'OsFileSystem',
    'PackageContext',
    'ProviderEntry',
    'SimpleBuildContext',
    'VarMismatch',
    'check_make_vars',
    'collect_provider_vars',
    'compare_make_var',
    'default_registry',
    'make_vars_file_name',
    'render_make_vars',
    'singleton_make_vars_provider_adapter',
    'write_file_if_changed',
]
