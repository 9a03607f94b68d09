"""
Component factory for the make vars pass.

This module builds the pieces a make vars pass needs (packages, modules,
build context, provider registry) from a MakeVarsConfig. It centralizes the
wiring so the CLI and tests set up a pass the same way.
"""

from typing import Dict, List

from ..config.build_config import MakeVarsConfig
from ..config.ini_parser import EXPORT_KINDS, ExportSection
from .context import MakeVarsContext, PackageContext
from .registry import MakeVarsProviderRegistry, default_registry
from .simple_context import Module, SimpleBuildContext


class ExportSectionProvider:
    """Exports the variables of one makevars.ini export section."""

    def __init__(self, section: ExportSection):
        self.section = section

    def make_vars(self, ctx: MakeVarsContext) -> None:
        strict, sort, raw = EXPORT_KINDS[self.section.kind]
        if raw:
            add = ctx.strict_raw if strict else ctx.check_raw
        elif strict:
            add = ctx.strict_sorted if sort else ctx.strict
        else:
            add = ctx.check_sorted if sort else ctx.check

        for name, value in self.section.variables:
            add(name, value)


class MakeVarsComponentFactory:
    """
    Factory for creating make vars components from configuration.

    Example usage:
        config = MakeVarsConfig.from_ini(Path("makevars.ini"))
        packages = MakeVarsComponentFactory.create_packages(config)
        ctx = MakeVarsComponentFactory.create_build_context(config, packages)
        registry = MakeVarsComponentFactory.create_registry(config, packages)
    """

    @staticmethod
    def create_packages(config: MakeVarsConfig) -> Dict[str, PackageContext]:
        """
        Create one PackageContext per namespace.

        Namespaces referenced only by export sections get an empty package.

        Args:
            config: Build configuration

        Returns:
            Packages by name
        """
        packages = {
            name: PackageContext(name, dict(variables))
            for name, variables in config.namespaces.items()
        }
        for export in config.exports:
            packages.setdefault(export.namespace, PackageContext(export.namespace))
        return packages

    @staticmethod
    def create_modules(config: MakeVarsConfig) -> List[Module]:
        """Create the module list from [module:<name>] sections."""
        return [
            Module(
                name=name,
                dir=props.get("dir", ""),
                sub_dir=props.get("sub_dir", ""),
                type=props.get("type", ""),
                blueprint_file=props.get("blueprint_file", ""),
            )
            for name, props in config.modules.items()
        ]

    @staticmethod
    def create_build_context(
        config: MakeVarsConfig,
        packages: Dict[str, PackageContext]
    ) -> SimpleBuildContext:
        """Create the build context shared by all providers."""
        return SimpleBuildContext(
            config,
            packages=packages.values(),
            modules=MakeVarsComponentFactory.create_modules(config),
        )

    @staticmethod
    def create_registry(
        config: MakeVarsConfig,
        packages: Dict[str, PackageContext]
    ) -> MakeVarsProviderRegistry:
        """
        Create a registry with the built-in providers followed by one
        provider per export section, in file order.

        Args:
            config: Build configuration
            packages: Packages from create_packages()

        Returns:
            Populated registry
        """
        registry = default_registry()
        for export in config.exports:
            registry.register_singleton(
                ExportSectionProvider(export),
                namespace=packages[export.namespace]
            )
        return registry
