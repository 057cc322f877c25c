"""
repositories/normalizer.py
--------------------------
Reshapes raw result rows for display.

Two passes, in order:
    1. Date-typed columns are rendered as calendar dates (UTC, DATE_FORMAT).
    2. Column names are turned into display names: 'start_date' -> 'Start Date'.

Input rows are never modified; each output row is a new read-only mapping.
"""

import warnings
from datetime import date, datetime, timezone
from typing import Any, Iterable, Mapping, Optional, Sequence

from dateutil.parser import isoparse

from config import DATE_FORMAT
from models.errors import NormalizationWarning
from models.records import FieldDescriptor, freeze_row
from utils.logger import get_logger

logger = get_logger(__name__)


def normalize_field_name(field_name: str) -> str:
    """'start_date' -> 'Start Date'. Names without underscores only get a capital."""
    return " ".join(segment[:1].upper() + segment[1:] for segment in field_name.split("_"))


def denormalize_field_name(display_name: str) -> str:
    """'Start Date' -> 'start_date'."""
    return "_".join(
        segment[:1].lower() + segment[1:] for segment in display_name.strip().split(" ")
    )


def format_date_value(value: Any, date_format: str = DATE_FORMAT) -> Optional[Any]:
    """
    Render a stored instant as a date string.

    Aware datetimes are converted to UTC first; naive ones are taken to
    already be UTC. ISO-8601 strings are parsed. None is kept as None and
    values of any other type are returned unchanged.
    """
    if value is None:
        return None
    if isinstance(value, str):
        try:
            value = isoparse(value)
        except ValueError:
            logger.warning(f"Could not parse date value {value!r}; leaving it as is")
            return value
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        return value.strftime(date_format)
    if isinstance(value, date):
        return value.strftime(date_format)
    return value


def _warn(message: str) -> None:
    logger.warning(message)
    warnings.warn(message, NormalizationWarning, stacklevel=3)


def normalize_rows(
    rows: Sequence[Mapping[str, Any]],
    fields: Iterable[FieldDescriptor] = (),
    date_format: str = DATE_FORMAT,
) -> tuple[Mapping[str, Any], ...]:
    """
    Format date columns and rename every key to its display name.

    Args:
        rows: Raw rows keyed by column name.
        fields: Column descriptors of the query that produced `rows`.
        date_format: strftime pattern for date columns.

    Returns:
        A tuple of new read-only rows. When two raw names map to the same
        display name the later column wins and a NormalizationWarning is issued.
    """
    if not rows:
        _warn("No rows passed in for normalization; skipping normalization")
        return ()

    date_columns = {f.name for f in fields if f.is_date}

    logger.info(f"Normalizing result keys: {list(rows[0].keys())}")

    normalized = []
    collisions = set()
    for row in rows:
        out: dict[str, Any] = {}
        for key, value in row.items():
            if key in date_columns:
                value = format_date_value(value, date_format)
            display = normalize_field_name(key)
            if display in out:
                collisions.add(display)
            out[display] = value
        normalized.append(freeze_row(out))

    if collisions:
        _warn(f"Columns collided after normalization, later values kept: {sorted(collisions)}")

    logger.info(f"Postnormalization: {list(normalized[0].keys())}")
    return tuple(normalized)
