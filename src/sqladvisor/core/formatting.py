"""Summary formatting utilities for consistent terminal output.

Design principles:
- Every summary fits on one line (~80 chars max)
- Enum constants are shown as words, not SHOUTING_SNAKE_CASE
- Grammatically correct (1 rule vs 2 rules)
"""

from __future__ import annotations

from collections.abc import Sequence


def humanize_constant(value: str) -> str:
    """Turn an enum constant into display text.

    Examples:
        SUBQUERY_CORRELATED -> Subquery correlated
        NOT_AVAILABLE -> Not available
        CTE -> CTE
    """
    if "_" not in value and value.isupper() and len(value) <= 4:
        return value  # acronyms stay as-is
    words = value.replace("_", " ").lower()
    return words[:1].upper() + words[1:]


def format_rationale(rationale: Sequence[str], *, numbered: bool = True) -> str:
    """Render rationale lines as a block of text.

    Examples:
        ["a", "b"] -> "1. a\\n2. b"
        ["a"] -> "a"
    """
    if not rationale:
        return ""
    if len(rationale) == 1 or not numbered:
        return "\n".join(rationale)
    return "\n".join(f"{i}. {line}" for i, line in enumerate(rationale, start=1))


def format_percent(value: float) -> str:
    """Format a percentage without rounding, so a value never appears in another band.

    Examples:
        30.0 -> "30%"
        4.95 -> "4.95%"
    """
    number = float(value)
    if number.is_integer():
        return f"{int(number)}%"
    return f"{number!r}%"


def pluralize(count: int, singular: str, plural: str | None = None) -> str:
    """Return grammatically correct singular/plural form.

    Args:
        count: The number of items
        singular: Singular form (e.g., "rule")
        plural: Plural form (default: singular + "s")

    Returns:
        Formatted string like "1 rule" or "3 rules"
    """
    if plural is None:
        plural = singular + "s"
    word = singular if count == 1 else plural
    return f"{count} {word}"


def truncate_at_word(text: str, max_len: int = 40, suffix: str = "...") -> str:
    """Truncate text at word boundary.

    Args:
        text: Text to truncate
        max_len: Maximum length including suffix
        suffix: Suffix to append if truncated

    Examples:
        "Requires SQL Agent jobs or a maintenance plan" -> "Requires SQL Agent jobs or a..."
    """
    if len(text) <= max_len:
        return text

    cut_at = max_len - len(suffix)
    if cut_at <= 0:
        return suffix

    space_idx = text.rfind(" ", 0, cut_at)
    if space_idx > 0:
        return text[:space_idx] + suffix

    # No space found, hard cut
    return text[:cut_at] + suffix
