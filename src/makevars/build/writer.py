"""Makefile fragment rendering for exported make variables.

The generated file defines soong-compare-var, then assigns and checks every
strict variable, fails Make if any strict check failed, then assigns and
checks the remaining variables.
"""

import logging
from typing import Iterable

from .variable import MakeVarsVariable

MAKE_VARS_HEADER = """# Autogenerated file

# Compares SOONG_$(1) against $(1), and warns if they are not equal.
#
# If the original variable is empty, then just set it to the SOONG_ version.
#
# $(1): Name of the variable to check
# $(2): If not-empty, sort the values before comparing
# $(3): Extra snippet to run if it does not match
define soong-compare-var
ifneq ($$($(1)),)
  my_val_make := $$(strip $(if $(2),$$(sort $$($(1))),$$($(1))))
  my_val_soong := $(if $(2),$$(sort $$(SOONG_$(1))),$$(SOONG_$(1)))
  ifneq ($$(my_val_make),$$(my_val_soong))
    $$(warning $(1) does not match between Make and Soong:)
    $(if $(2),$$(warning Make  adds: $$(filter-out $$(my_val_soong),$$(my_val_make))),$$(warning Make : $$(my_val_make)))
    $(if $(2),$$(warning Soong adds: $$(filter-out $$(my_val_make),$$(my_val_soong))),$$(warning Soong: $$(my_val_soong)))
    $(3)
  endif
  my_val_make :=
  my_val_soong :=
else
  $(1) := $$(SOONG_$(1))
endif
.KATI_READONLY := $(1) SOONG_$(1)
endef

my_check_failed := false

"""

STRICT_CHECK_TRAILER = """
ifneq ($(my_check_failed),false)
  $(error Soong variable check failed)
endif
my_check_failed :=


"""

MAKE_VARS_FOOTER = "\nsoong-compare-var :=\n"

STRICT_FAILURE_SNIPPET = "my_check_failed := true"


def make_vars_file_name(make_suffix: str = "") -> str:
    """Name of the generated file, e.g. make_vars-aosp_arm.mk."""
    return f"make_vars{make_suffix}.mk"


def _render_variable(var: MakeVarsVariable) -> str:
    sort = "true" if var.sort else ""
    call_args = [var.name, sort]
    if var.strict:
        call_args.append(STRICT_FAILURE_SNIPPET)
    return (
        f"SOONG_{var.name} := {var.value}\n"
        f"$(eval $(call soong-compare-var,{','.join(call_args)}))\n\n"
    )


def render_make_vars(variables: Iterable[MakeVarsVariable]) -> bytes:
    """Render the makefile fragment for the given variables.

    Strict variables are written first so that when one of them fails, all
    strict errors are printed but none of the non-strict warnings.

    Args:
        variables: Variables in collection order

    Returns:
        UTF-8 encoded makefile content
    """
    variables = list(variables)
    parts = [MAKE_VARS_HEADER]

    parts.extend(_render_variable(v) for v in variables if v.strict)
    parts.append(STRICT_CHECK_TRAILER)
    parts.extend(_render_variable(v) for v in variables if not v.strict)
    parts.append(MAKE_VARS_FOOTER)

    return "".join(parts).encode("utf-8")


def write_file_if_changed(fs, path: str, data: bytes) -> bool:
    """Write data to path unless the file already holds exactly those bytes.

    Skipping identical writes keeps the file's timestamp stable so Make does
    not rebuild everything that depends on it.

    Args:
        fs: Filesystem abstraction (see OsFileSystem)
        path: Output file path
        data: Full file content

    Returns:
        True if the file was written, False if it was already up to date

    Raises:
        OSError: If the file cannot be written
    """
    if fs.exists(path):
        try:
            if fs.read_bytes(path) == data:
                return False
        except OSError as e:
            logging.debug(f"Could not read {path}, rewriting it: {e}")
    fs.write_bytes(path, data)
    return True
