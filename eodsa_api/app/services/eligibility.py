"""
Pure validation rules for competition entries.

These checks need no database access: participant count against the
performance type, duplicate participants, and the item details of the
entry form.  Each raises ``ValidationError`` with a message fit for the
client.
"""

from typing import Sequence

from eodsa_api.app.core.constants import (
    ITEM_STYLES,
    MASTERY_LEVELS,
    MAX_ITEM_DURATION,
    MIN_ITEM_DURATION,
    PARTICIPANT_LIMITS,
)
from eodsa_api.app.core.errors import ValidationError


def check_participant_count(performance_type: str, count: int) -> None:
    """Raise unless ``count`` is within the bounds for ``performance_type``."""
    if performance_type not in PARTICIPANT_LIMITS:
        raise ValidationError(f"Unknown performance type: {performance_type}")
    low, high = PARTICIPANT_LIMITS[performance_type]
    if not low <= count <= high:
        if low == high:
            expected = f"exactly {low}"
        else:
            expected = f"between {low} and {high}"
        raise ValidationError(
            f"{performance_type} entries require {expected} participant{'s' if high > 1 else ''}, got {count}"
        )


def check_unique_participants(participant_ids: Sequence[str]) -> None:
    if len(set(participant_ids)) != len(participant_ids):
        raise ValidationError("Each participant may only be listed once per entry")


def check_item_details(mastery: str, item_style: str, estimated_duration: int) -> None:
    if mastery not in MASTERY_LEVELS:
        raise ValidationError(f"Invalid mastery level: {mastery}")
    if item_style not in ITEM_STYLES:
        raise ValidationError(f"Invalid item style: {item_style}")
    if not MIN_ITEM_DURATION <= estimated_duration <= MAX_ITEM_DURATION:
        raise ValidationError(
            f"Estimated duration must be between {MIN_ITEM_DURATION} and {MAX_ITEM_DURATION} minutes"
        )
