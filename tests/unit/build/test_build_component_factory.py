"""
Unit tests for MakeVarsComponentFactory and ExportSectionProvider.
"""

import pytest
from unittest.mock import Mock

from makevars.build import (
    ExportSectionProvider,
    MakeVarsComponentFactory,
    MakeVarsContext,
    MakeVarsSingleton,
    MakeVarsState,
)
from makevars.config import ExportSection, MakeVarsConfig


@pytest.fixture
def config(tmp_path):
    ini_path = tmp_path / "makevars.ini"
    ini_path.write_text(
        "[build]\n"
        "make_suffix = -test\n"
        "min_supported_sdk_version = 24\n"
        "[namespace:java]\n"
        "hostOut = out/host\n"
        "[module:libfoo]\n"
        "dir = external/foo\n"
        "type = cc_library\n"
        "[strict:java]\n"
        "HOST_OUT = ${hostOut}\n"
        "[check_sorted:cc]\n"
        "CLANG_FLAGS = -O2 -g\n"
        "[check_raw:cc]\n"
        "RAW = $(keep)\n"
    )
    return MakeVarsConfig.from_ini(ini_path)


class TestExportSectionProvider:
    """Each section kind maps to the matching export operation."""

    @pytest.mark.parametrize("kind,method", [
        ("strict", "strict"),
        ("strict_sorted", "strict_sorted"),
        ("strict_raw", "strict_raw"),
        ("check", "check"),
        ("check_sorted", "check_sorted"),
        ("check_raw", "check_raw"),
    ])
    def test_kind_to_method(self, kind, method):
        ctx = Mock(spec=MakeVarsContext)
        section = ExportSection(kind, "java", [("A", "1"), ("B", "2")])

        ExportSectionProvider(section).make_vars(ctx)

        calls = getattr(ctx, method).call_args_list
        assert [c.args for c in calls] == [("A", "1"), ("B", "2")]


class TestMakeVarsComponentFactory:
    """Test suite for MakeVarsComponentFactory."""

    def test_create_packages(self, config):
        packages = MakeVarsComponentFactory.create_packages(config)

        assert packages["java"].variables == {"hostOut": "out/host"}
        assert packages["cc"].variables == {}

    def test_create_modules(self, config):
        modules = MakeVarsComponentFactory.create_modules(config)

        assert len(modules) == 1
        assert modules[0].name == "libfoo"
        assert modules[0].dir == "external/foo"
        assert modules[0].type == "cc_library"

    def test_create_registry_order(self, config):
        packages = MakeVarsComponentFactory.create_packages(config)

        registry = MakeVarsComponentFactory.create_registry(config, packages)

        namespaces = [entry.namespace.name for entry in registry]
        assert namespaces == ["android", "java", "cc", "cc"]

    def test_end_to_end(self, config):
        packages = MakeVarsComponentFactory.create_packages(config)
        ctx = MakeVarsComponentFactory.create_build_context(config, packages)
        registry = MakeVarsComponentFactory.create_registry(config, packages)

        result = MakeVarsSingleton(registry).generate_build_actions(ctx)

        assert result.state == MakeVarsState.DONE
        assert [(v.name, v.value, v.strict, v.sort) for v in result.vars] == [
            ("MIN_SUPPORTED_SDK_VERSION", "24", True, False),
            ("HOST_OUT", "out/host", True, False),
            ("CLANG_FLAGS", "-O2 -g", False, True),
            ("RAW", "$(keep)", False, False),
        ]
        assert result.out_file == config.out_dir / "make_vars-test.mk"
        assert result.out_file.exists()

    def test_multiline_value_renders_on_one_line(self, tmp_path):
        ini_path = tmp_path / "makevars.ini"
        ini_path.write_text("[check_sorted:android]\nPRODUCT_PACKAGES = a\n  b\n")
        config = MakeVarsConfig.from_ini(ini_path)
        packages = MakeVarsComponentFactory.create_packages(config)
        ctx = MakeVarsComponentFactory.create_build_context(config, packages)
        registry = MakeVarsComponentFactory.create_registry(config, packages)

        result = MakeVarsSingleton(registry).generate_build_actions(ctx)

        assert result.state == MakeVarsState.DONE
        assert b"SOONG_PRODUCT_PACKAGES := a b\n" in result.out_file.read_bytes()
