"""Preview of the checks the generated make vars file performs.

These functions mirror soong-compare-var from the generated makefile, so the
outcome of loading the file into Make can be predicted for a known set of
existing Make values without running Make.
"""

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Mapping, Optional

from .variable import MakeVarsVariable


def make_strip(value: str) -> str:
    """Equivalent of $(strip value)."""
    return " ".join(value.split())


def make_sort(value: str) -> List[str]:
    """Equivalent of $(sort value): sorted, without duplicates."""
    return sorted(set(value.split()))


def make_pattern_match(pattern: str, word: str) -> bool:
    """Match word against a Make pattern, where the first % matches any text."""
    if "%" not in pattern:
        return pattern == word
    prefix, suffix = pattern.split("%", 1)
    return (
        len(word) >= len(prefix) + len(suffix)
        and word.startswith(prefix)
        and word.endswith(suffix)
    )


def make_filter_out(remove: Iterable[str], words: Iterable[str]) -> List[str]:
    """Equivalent of $(filter-out remove,words).

    Entries of remove containing % are patterns, as in Make.
    """
    remove = list(remove)
    return [w for w in words if not any(make_pattern_match(p, w) for p in remove)]


@dataclass
class VarMismatch:
    """A variable whose Make and exported values differ.

    Attributes:
        name: Variable name
        sort: Values were compared as unordered lists
        make_value: Make's value as compared
        soong_value: Exported value as compared
        make_only: Entries only Make has (sorted comparisons only)
        soong_only: Entries only the export has (sorted comparisons only)
    """

    name: str
    sort: bool
    make_value: str
    soong_value: str
    make_only: List[str] = field(default_factory=list)
    soong_only: List[str] = field(default_factory=list)

    def warning_lines(self) -> List[str]:
        """Lines Make would print for this mismatch."""
        lines = [f"{self.name} does not match between Make and Soong:"]
        if self.sort:
            lines.append(f"Make  adds: {' '.join(self.make_only)}")
            lines.append(f"Soong adds: {' '.join(self.soong_only)}")
        else:
            lines.append(f"Make : {self.make_value}")
            lines.append(f"Soong: {self.soong_value}")
        return lines


def compare_make_var(
    name: str,
    make_value: str,
    soong_value: str,
    sort: bool
) -> Optional[VarMismatch]:
    """
    Compare an existing Make value with an exported value.

    Args:
        name: Variable name
        make_value: Non-empty value already set in Make
        soong_value: Exported value
        sort: Compare as unordered lists

    Returns:
        None if the values match, otherwise the mismatch

    Example:
        >>> compare_make_var("X", "b a", "a b", sort=True) is None
        True
        >>> compare_make_var("X", "a b", "a", sort=True).make_only
        ['b']
    """
    if sort:
        make_words = make_sort(make_value)
        soong_words = make_sort(soong_value)
        if make_words == soong_words:
            return None
        return VarMismatch(
            name=name,
            sort=True,
            make_value=" ".join(make_words),
            soong_value=" ".join(soong_words),
            make_only=make_filter_out(soong_words, make_words),
            soong_only=make_filter_out(make_words, soong_words),
        )

    make_val = make_strip(make_value)
    soong_val = soong_value.strip()
    if make_val == soong_val:
        return None
    return VarMismatch(name=name, sort=False, make_value=make_val, soong_value=soong_val)


@dataclass
class CheckResult:
    """Predicted outcome of loading the make vars file into Make.

    Attributes:
        values: Make variable values after the file is loaded
        adopted: Names that were empty in Make and took the exported value
        strict_mismatches: Mismatches that fail the build
        warnings: Mismatches that only warn
    """

    values: Dict[str, str] = field(default_factory=dict)
    adopted: List[str] = field(default_factory=list)
    strict_mismatches: List[VarMismatch] = field(default_factory=list)
    warnings: List[VarMismatch] = field(default_factory=list)

    @property
    def failed(self) -> bool:
        return bool(self.strict_mismatches)

    def error_message(self) -> str:
        """Describe every strict mismatch, or return an empty string."""
        if not self.strict_mismatches:
            return ""
        lines = []
        for mismatch in self.strict_mismatches:
            lines.extend(mismatch.warning_lines())
        lines.append("Soong variable check failed")
        return "\n".join(lines)


def check_make_vars(
    variables: Iterable[MakeVarsVariable],
    legacy: Mapping[str, str]
) -> CheckResult:
    """
    Predict what Make does with the exported variables.

    Strict variables are checked first, then the rest, in collection order.
    An empty Make variable adopts the exported value; later records with the
    same name are compared against the adopted value. Make values that are
    already set are never changed.

    Args:
        variables: Exported variables in collection order
        legacy: Values Make defines before loading the file

    Returns:
        CheckResult with final values and all mismatches
    """
    variables = list(variables)
    result = CheckResult(values=dict(legacy))

    ordered = [v for v in variables if v.strict] + [v for v in variables if not v.strict]
    for var in ordered:
        current = result.values.get(var.name, "")
        if not current.strip():
            result.values[var.name] = var.value
            result.adopted.append(var.name)
            continue

        mismatch = compare_make_var(var.name, current, var.value, var.sort)
        if mismatch is None:
            continue
        if var.strict:
            result.strict_mismatches.append(mismatch)
        else:
            result.warnings.append(mismatch)

    return result
