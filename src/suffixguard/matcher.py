from __future__ import annotations

from typing import Iterable, Optional, Sequence

from .models import Match
from .rules_io import load_embedded_rules
from .syntax import is_valid_candidate

WILDCARD = "*"
EXCEPTION_MARKER = "!"


def is_exception_rule(rule: Sequence[str]) -> bool:
    return bool(rule) and rule[0].startswith(EXCEPTION_MARKER)


def rule_matches(rule: Sequence[str], labels: Sequence[str]) -> bool:
    """Compare a rule with a host's labels from the TLD leftwards.

    An exception-marked rule label ends the walk: the rule matches exactly
    when the unmarked text equals the host label at that position. A rule
    with more labels than the host never matches.
    """
    if not rule or not labels:
        return False
    for rule_label, label in zip(reversed(rule), reversed(labels)):
        if rule_label.startswith(EXCEPTION_MARKER):
            return rule_label[len(EXCEPTION_MARKER):] == label
        if rule_label == WILDCARD or rule_label == label:
            continue
        return False
    return len(rule) <= len(labels)


def match(
    candidate: str, rules: Optional[Iterable[Sequence[str]]] = None
) -> Optional[Match]:
    """Find the rule deciding whether ``candidate`` is a public suffix.

    Returns ``None`` when the candidate is not a well-formed host or when no
    rule applies to it. ``rules`` defaults to the bundled registry.
    """
    if not is_valid_candidate(candidate):
        return None
    if rules is None:
        rules = load_embedded_rules()

    labels = candidate.split(".")
    matched = [tuple(rule) for rule in rules if rule_matches(rule, labels)]
    if not matched:
        return None

    for rule in matched:
        if is_exception_rule(rule):
            return Match(matched_rules=matched, prevailing_rule=rule, is_restricted=False)

    # max() keeps the first rule among equal lengths
    prevailing = max(matched, key=len)
    return Match(
        matched_rules=matched,
        prevailing_rule=prevailing,
        is_restricted=len(labels) <= len(prevailing),
    )


def is_unrestricted(
    candidate: str, rules: Optional[Iterable[Sequence[str]]] = None
) -> bool:
    result = match(candidate, rules)
    if result is None:
        return False
    return not result.is_restricted
