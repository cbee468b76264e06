"""Human-readable document numbers: ``{PREFIX}-{YYYYMMDD}-{NNNN}``.

The sequence restarts every day. Each prefix and day keeps its own
high-water mark in the store, so a number is never issued twice, not even
after the document that carried it has been deleted.
"""

from __future__ import annotations

from datetime import date

from shopstock.domain.repository.sequence_repository import SequenceRepository

SEQUENCE_WIDTH = 4


def day_prefix(prefix: str, day: date) -> str:
    return f"{prefix}-{day:%Y%m%d}-"


def format_document_number(prefix: str, day: date, sequence: int) -> str:
    return f"{day_prefix(prefix, day)}{sequence:0{SEQUENCE_WIDTH}d}"


def next_document_number(sequences: SequenceRepository, prefix: str, day: date) -> str:
    """Allocate the next number for *prefix* on *day* inside the caller's unit of work."""
    return format_document_number(prefix, day, sequences.advance(day_prefix(prefix, day)))
