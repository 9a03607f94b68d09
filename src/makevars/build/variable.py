"""Exported make variable record."""

from dataclasses import dataclass


@dataclass(frozen=True)
class MakeVarsVariable:
    """One variable exported to Make.

    Attributes:
        name: Make variable name (without the SOONG_ prefix)
        value: Fully resolved value, ready to embed in a makefile
        strict: A mismatch against the existing Make value fails the build
        sort: Compare as an unordered whitespace-separated list
    """

    name: str
    value: str
    strict: bool
    sort: bool
