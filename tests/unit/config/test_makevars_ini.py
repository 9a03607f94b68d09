"""
Unit tests for makevars.ini parsing and MakeVarsConfig loading.
"""

import pytest
from pathlib import Path

from makevars.config import MakeVarsConfig, MakeVarsConfigError, MakeVarsIni


class TestMakeVarsIni:
    """Test suite for MakeVarsIni parser."""

    @pytest.fixture
    def tmp_ini_path(self, tmp_path):
        """Fixture to provide a temporary INI file path."""
        return tmp_path / "makevars.ini"

    @pytest.fixture
    def full_config(self, tmp_ini_path):
        """Create a config using every section type."""
        content = """
[build]
make_suffix = -aosp_arm
out_dir = out/soong
min_supported_sdk_version = 21

[device]
arch = arm64

[namespace:java]
hostOut = out/host
toolsDir = ${hostOut}/bin

[module:libfoo]
dir = external/foo
type = cc_library

[strict:java]
HOST_OUT = ${hostOut}
TOOLS_DIR = ${toolsDir}

[check_sorted:java]
PRODUCT_PACKAGES = b a

[strict_raw:android]
RAW_VALUE = $(literal)
"""
        tmp_ini_path.write_text(content)
        return tmp_ini_path

    def test_missing_file(self, tmp_path):
        with pytest.raises(MakeVarsConfigError, match="not found"):
            MakeVarsIni(tmp_path / "missing.ini")

    def test_parse_error(self, tmp_ini_path):
        tmp_ini_path.write_text("not a section\n")

        with pytest.raises(MakeVarsConfigError, match="Failed to parse"):
            MakeVarsIni(tmp_ini_path)

    def test_sections(self, full_config):
        ini = MakeVarsIni(full_config)

        assert ini.get_section("build")["make_suffix"] == "-aosp_arm"
        assert ini.get_section("device") == {"arch": "arm64"}
        assert ini.get_section("nonexistent") == {}

    def test_dollar_values_are_not_interpolated(self, full_config):
        ini = MakeVarsIni(full_config)

        namespaces = dict(ini.get_namespaces())
        assert namespaces["java"]["toolsDir"] == "${hostOut}/bin"

    def test_names_keep_case(self, full_config):
        ini = MakeVarsIni(full_config)

        exports = ini.get_exports()
        assert exports[0].variables == [
            ("HOST_OUT", "${hostOut}"),
            ("TOOLS_DIR", "${toolsDir}"),
        ]
        assert dict(ini.get_namespaces())["java"]["hostOut"] == "out/host"

    def test_exports_in_file_order(self, full_config):
        ini = MakeVarsIni(full_config)

        exports = ini.get_exports()
        assert [(e.kind, e.namespace) for e in exports] == [
            ("strict", "java"),
            ("check_sorted", "java"),
            ("strict_raw", "android"),
        ]

    def test_modules(self, full_config):
        ini = MakeVarsIni(full_config)

        assert ini.get_modules() == [("libfoo", {"dir": "external/foo", "type": "cc_library"})]

    def test_export_without_namespace(self, tmp_ini_path):
        tmp_ini_path.write_text("[strict]\nFOO = bar\n")

        with pytest.raises(MakeVarsConfigError, match="must name a namespace"):
            MakeVarsIni(tmp_ini_path).get_exports()

    def test_multiline_value_is_joined(self, tmp_ini_path):
        tmp_ini_path.write_text("[check_sorted:android]\nPRODUCT_PACKAGES = a\n  b\n")

        exports = MakeVarsIni(tmp_ini_path).get_exports()

        assert exports[0].variables == [("PRODUCT_PACKAGES", "a b")]

    def test_multiline_value_starting_on_next_line(self, tmp_ini_path):
        tmp_ini_path.write_text("[namespace:java]\npackages =\n    a\n\n    b\n")

        assert dict(MakeVarsIni(tmp_ini_path).get_namespaces())["java"] == {"packages": "a b"}

    def test_default_section_is_rejected(self, tmp_ini_path):
        tmp_ini_path.write_text("[DEFAULT]\nout_dir = out/x\n[strict_raw:android]\nFOO = bar\n")

        with pytest.raises(MakeVarsConfigError, match=r"\[DEFAULT\] is not supported"):
            MakeVarsIni(tmp_ini_path)

    def test_empty_default_section_is_allowed(self, tmp_ini_path):
        tmp_ini_path.write_text("[DEFAULT]\n[strict_raw:android]\nFOO = bar\n")

        exports = MakeVarsIni(tmp_ini_path).get_exports()

        assert exports[0].variables == [("FOO", "bar")]


class TestMakeVarsConfig:
    """Test suite for MakeVarsConfig."""

    def test_defaults(self):
        config = MakeVarsConfig()

        assert config.embedded_in_make is True
        assert config.make_suffix == ""
        assert config.min_supported_sdk_version == 14
        assert config.path_for_output("make_vars.mk") == Path("out/soong/make_vars.mk")

    def test_from_ini(self, tmp_path):
        ini_path = tmp_path / "makevars.ini"
        ini_path.write_text(
            "[build]\n"
            "make_suffix = -aosp_arm\n"
            "min_supported_sdk_version = 21\n"
            "embedded_in_make = no\n"
            "custom = value\n"
            "[device]\n"
            "arch = arm64\n"
        )

        config = MakeVarsConfig.from_ini(ini_path)

        assert config.make_suffix == "-aosp_arm"
        assert config.min_supported_sdk_version == 21
        assert config.embedded_in_make is False
        assert config.out_dir == tmp_path / "out" / "soong"
        assert config.source_dir == tmp_path / "."
        assert config.get("custom") == "value"
        assert config.device_config.get("arch") == "arm64"
        assert config.device_config.get("missing") is None

    def test_from_ini_empty_file_uses_defaults(self, tmp_path):
        ini_path = tmp_path / "makevars.ini"
        ini_path.write_text("")

        config = MakeVarsConfig.from_ini(ini_path)

        assert config.embedded_in_make is True
        assert config.exports == []
        assert config.path_for_output("x.mk") == tmp_path / "out" / "soong" / "x.mk"

    def test_invalid_sdk_version(self, tmp_path):
        ini_path = tmp_path / "makevars.ini"
        ini_path.write_text("[build]\nmin_supported_sdk_version = abc\n")

        with pytest.raises(MakeVarsConfigError, match="integer"):
            MakeVarsConfig.from_ini(ini_path)

    def test_invalid_bool(self, tmp_path):
        ini_path = tmp_path / "makevars.ini"
        ini_path.write_text("[build]\nembedded_in_make = maybe\n")

        with pytest.raises(MakeVarsConfigError, match="Invalid boolean"):
            MakeVarsConfig.from_ini(ini_path)
