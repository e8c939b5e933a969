from __future__ import annotations


def format_change(value: int) -> str:
    # Credits carry an explicit sign so they line up with debits.
    if value > 0:
        return f"+{value}"
    return str(value)
