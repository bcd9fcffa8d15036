"""
Competition vocabulary.

Fixed enumerations used to validate events and entries, plus the
participant-count table that bounds each performance type.
"""

from typing import Dict, Tuple


REGIONS = [
    "Gauteng",
    "Free State",
    "Mpumalanga",
]

AGE_CATEGORIES = [
    "Under 6",
    "6-8 years",
    "9-11 years",
    "12-14 years",
    "15-17 years",
    "18+ years",
]

# (min, max) participants per performance type, inclusive.
PARTICIPANT_LIMITS: Dict[str, Tuple[int, int]] = {
    "Solo": (1, 1),
    "Duet": (2, 2),
    "Trio": (3, 3),
    "Group": (4, 30),
}

MASTERY_LEVELS = [
    "Beginner",
    "Intermediate",
    "Advanced",
    "Open",
    "Professional",
]

ITEM_STYLES = [
    "Ballet - Classical Variation",
    "Ballet - Contemporary Ballet",
    "Ballet - Demi Character",
    "Contemporary - Lyrical",
    "Contemporary - Modern",
    "Jazz - Commercial",
    "Jazz - Musical Theatre",
    "Jazz - Funk",
    "Hip Hop - Old School",
    "Hip Hop - New School",
    "Hip Hop - Commercial",
    "Tap - Traditional",
    "Tap - Contemporary",
    "Musical Theatre",
    "Commercial Dance",
    "Acrobatic Dance",
    "Cultural/Traditional",
    "Other",
]

# Entries are only accepted while an event is in one of these states.
OPEN_EVENT_STATUSES = {"upcoming", "registration_open"}

APPROVAL_STATUSES = ["pending", "approved", "rejected"]

APPLICATION_STATUSES = ["pending", "accepted", "rejected", "withdrawn"]

MIN_SCORE = 1
MAX_SCORE = 10

MIN_ITEM_DURATION = 1
MAX_ITEM_DURATION = 10

MIN_PASSWORD_LENGTH = 6

# Age below which guardian contact details are mandatory.
ADULT_AGE = 18
