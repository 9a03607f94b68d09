"""Unit tests for the make vars provider registry."""

import pytest
from unittest.mock import Mock

from makevars.build import (
    DEFAULT_NAMESPACE,
    MakeVarsContext,
    MakeVarsError,
    MakeVarsProviderRegistry,
    PackageContext,
    default_registry,
    singleton_make_vars_provider_adapter,
)
from makevars.config import MakeVarsConfig


class TestMakeVarsProviderRegistry:
    """Test suite for MakeVarsProviderRegistry."""

    def test_empty(self):
        registry = MakeVarsProviderRegistry()

        assert len(registry) == 0
        assert list(registry) == []

    def test_register_keeps_order(self):
        registry = MakeVarsProviderRegistry()
        pkg_a = PackageContext("a")
        pkg_b = PackageContext("b")
        first = Mock()
        second = Mock()

        registry.register(pkg_a, first)
        registry.register(pkg_b, second)

        entries = list(registry)
        assert [e.namespace.name for e in entries] == ["a", "b"]
        assert entries[0].call is first
        assert entries[1].call is second

    def test_duplicate_registration_is_allowed(self):
        registry = MakeVarsProviderRegistry()
        provider = Mock()

        registry.register(DEFAULT_NAMESPACE, provider)
        registry.register(DEFAULT_NAMESPACE, provider)

        assert len(registry) == 2

    @pytest.mark.parametrize("provider", [None, "not callable", 42])
    def test_register_rejects_non_callable(self, provider):
        registry = MakeVarsProviderRegistry()

        with pytest.raises(MakeVarsError):
            registry.register(DEFAULT_NAMESPACE, provider)

        assert len(registry) == 0

    def test_register_singleton(self):
        registry = MakeVarsProviderRegistry()
        singleton = Mock(spec=["make_vars"])
        ctx = Mock(spec=MakeVarsContext)

        registry.register_singleton(singleton)
        entry = list(registry)[0]
        entry.call(ctx)

        assert entry.namespace is DEFAULT_NAMESPACE
        singleton.make_vars.assert_called_once_with(ctx)

    def test_register_singleton_with_namespace(self):
        registry = MakeVarsProviderRegistry()
        pkg = PackageContext("cc")

        registry.register_singleton(Mock(spec=["make_vars"]), namespace=pkg)

        assert list(registry)[0].namespace is pkg

    def test_register_singleton_requires_make_vars(self):
        registry = MakeVarsProviderRegistry()

        with pytest.raises(MakeVarsError, match="make_vars"):
            registry.register_singleton(object())

    def test_adapter_forwards_context(self):
        singleton = Mock(spec=["make_vars"])
        ctx = Mock()

        singleton_make_vars_provider_adapter(singleton)(ctx)

        singleton.make_vars.assert_called_once_with(ctx)


class TestDefaultRegistry:
    """The built-in provider exports MIN_SUPPORTED_SDK_VERSION."""

    def test_exports_min_sdk_version(self):
        registry = default_registry()
        ctx = Mock(spec=MakeVarsContext)
        ctx.config = MakeVarsConfig(min_supported_sdk_version=21)

        assert len(registry) == 1
        list(registry)[0].call(ctx)

        ctx.strict.assert_called_once_with("MIN_SUPPORTED_SDK_VERSION", "21")

    def test_each_call_builds_a_new_registry(self):
        assert default_registry() is not default_registry()
