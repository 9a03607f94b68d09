"""Make vars provider registry.

Providers are registered once at program start, then run once per build pass
by MakeVarsSingleton in registration order.
"""

from dataclasses import dataclass
from typing import Any, Callable, Iterator, List, Optional

from .context import MakeVarsContext, PackageContext

MakeVarsProvider = Callable[[MakeVarsContext], None]

# Namespace used by providers that do not evaluate package variables
DEFAULT_NAMESPACE = PackageContext("android")


class MakeVarsError(Exception):
    """Raised when a provider cannot be registered."""
    pass


@dataclass(frozen=True)
class ProviderEntry:
    """A registered provider and the namespace it evaluates against."""

    namespace: PackageContext
    call: MakeVarsProvider


def singleton_make_vars_provider_adapter(singleton: Any) -> MakeVarsProvider:
    """Convert an object with a make_vars(ctx) method into a provider."""
    def provider(ctx: MakeVarsContext) -> None:
        singleton.make_vars(ctx)
    return provider


class MakeVarsProviderRegistry:
    """Ordered list of make vars providers.

    There is no unregister; registering the same provider twice runs it twice.

    Example usage:
        registry = MakeVarsProviderRegistry()
        registry.register(pctx, my_provider)
        registry.register_singleton(my_singleton)
    """

    def __init__(self):
        self._providers: List[ProviderEntry] = []

    def register(self, namespace: PackageContext, provider: MakeVarsProvider) -> None:
        """Append a provider.

        Args:
            namespace: Package the provider's ninja strings evaluate against
            provider: Callable taking a MakeVarsContext

        Raises:
            MakeVarsError: If provider is not callable
        """
        if provider is None or not callable(provider):
            raise MakeVarsError(f"Make vars provider must be callable, got {provider!r}")
        self._providers.append(ProviderEntry(namespace, provider))

    def register_singleton(
        self,
        singleton: Any,
        namespace: Optional[PackageContext] = None
    ) -> None:
        """Append an object exposing make_vars(ctx) as a provider.

        Args:
            singleton: Object with a make_vars(ctx) method
            namespace: Namespace to evaluate against (default: DEFAULT_NAMESPACE)

        Raises:
            MakeVarsError: If singleton has no callable make_vars
        """
        if not callable(getattr(singleton, "make_vars", None)):
            raise MakeVarsError(
                f"{type(singleton).__name__} does not implement make_vars(ctx)"
            )
        self.register(
            namespace or DEFAULT_NAMESPACE,
            singleton_make_vars_provider_adapter(singleton)
        )

    def __iter__(self) -> Iterator[ProviderEntry]:
        return iter(list(self._providers))

    def __len__(self) -> int:
        return len(self._providers)


def android_make_vars_provider(ctx: MakeVarsContext) -> None:
    ctx.strict("MIN_SUPPORTED_SDK_VERSION", str(ctx.config.min_supported_sdk_version))


def default_registry() -> MakeVarsProviderRegistry:
    """Create a registry holding the built-in providers."""
    registry = MakeVarsProviderRegistry()
    registry.register(DEFAULT_NAMESPACE, android_make_vars_provider)
    return registry
