"""Helpers for keeping patient identifiers out of log output."""
from __future__ import annotations

VISIBLE_TAIL = 4


def mask_ssn(ssn: str | None) -> str:
    """Return ``ssn`` with everything but the last four characters hidden.

    Separators such as ``-`` and spaces are preserved so the masked value
    keeps its shape, e.g. ``123-45-6789`` becomes ``***-**-6789``.
    Identifiers of four characters or fewer are hidden entirely.
    """
    if not ssn:
        return ''
    if len(ssn) <= VISIBLE_TAIL:
        return '*' * len(ssn)
    head, tail = ssn[:-VISIBLE_TAIL], ssn[-VISIBLE_TAIL:]
    return ''.join(c if c in '- ' else '*' for c in head) + tail
