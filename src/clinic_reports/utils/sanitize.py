"""Sanitization helpers for spreadsheet-bound output."""

from typing import Optional

# Leading characters that spreadsheet applications evaluate as formulas (| covers DDE)
_FORMULA_CHARS = ("=", "+", "-", "@", "\t", "\r", "\n", "|")


def sanitize_cell(value: Optional[str]) -> Optional[str]:
    """Neutralize a text cell that would otherwise be evaluated as a formula.

    Treatment names and notes are typed by clinic staff, so a name such as
    "=HYPERLINK(...)" is prefixed with a single quote before it reaches a
    CSV or Excel file.

    Args:
        value: Text value, or None.

    Returns:
        The safe text, or None if the input was None.
    """
    if not value:
        return value

    if value.startswith(_FORMULA_CHARS):
        return "'" + value

    return value
