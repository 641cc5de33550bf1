from __future__ import annotations

import unicodedata

HOST_MAX_LENGTH = 253
LABEL_MAX_LENGTH = 63

DISALLOWED_CHARACTERS = frozenset(",~:!@#$%^&'\"(){}_*")
CONTROL_CATEGORIES = ("Cc", "Cf")


def _is_disallowed(ch: str) -> bool:
    if ch in DISALLOWED_CHARACTERS or ch.isspace():
        return True
    return unicodedata.category(ch) in CONTROL_CATEGORIES


def validate_host(candidate: str) -> bool:
    """Check the whole host string before it is split into labels.

    Lengths are counted in code points, no IDNA encoding is applied.
    """
    if not 1 <= len(candidate) <= HOST_MAX_LENGTH:
        return False
    if candidate.startswith(".") or candidate.endswith("."):
        return False
    return not any(_is_disallowed(ch) for ch in candidate)


def validate_label(label: str) -> bool:
    if not 1 <= len(label) <= LABEL_MAX_LENGTH:
        return False
    return not (label.startswith("-") or label.endswith("-"))


def is_valid_candidate(candidate: str) -> bool:
    if not validate_host(candidate):
        return False
    return all(validate_label(label) for label in candidate.split("."))
