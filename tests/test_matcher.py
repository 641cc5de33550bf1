import pytest
from pydantic import ValidationError

from suffixguard.matcher import is_exception_rule, is_unrestricted, match, rule_matches
from suffixguard.models import Match


def test_simple_suffix() -> None:
    rules = [["com"]]
    assert is_unrestricted("com", rules) is False
    assert is_unrestricted("yahoo.com", rules) is True
    assert match("x.com", rules).is_restricted is False
    assert match("com", rules).is_restricted is True


def test_wildcard_rule_restricts_one_extra_label() -> None:
    rules = [["*", "com"]]
    assert is_unrestricted("yahoo.com", rules) is False
    assert is_unrestricted("mail.yahoo.com", rules) is True


def test_wildcard_does_not_match_bare_tld() -> None:
    assert match("com", [["*", "com"]]) is None


def test_exception_overrides_wildcard_in_any_order() -> None:
    assert is_unrestricted("yahoo.com", [["*", "com"], ["!yahoo", "com"]]) is True
    assert is_unrestricted("yahoo.com", [["!yahoo", "com"], ["*", "com"]]) is True


def test_exception_is_prevailing_rule() -> None:
    result = match("yahoo.com", [["*", "com"], ["!yahoo", "com"]])
    assert result.prevailing_rule == ("!yahoo", "com")
    assert result.matched_rules == (("*", "com"), ("!yahoo", "com"))
    assert result.is_restricted is False


def test_first_exception_wins() -> None:
    rules = [["*", "com"], ["!yahoo", "com"], ["!yahoo", "*"]]
    result = match("yahoo.com", rules)
    assert result.prevailing_rule == ("!yahoo", "com")


def test_exception_only_applies_to_its_label() -> None:
    rules = [["*", "ck"], ["!www", "ck"]]
    assert is_unrestricted("www.ck", rules) is True
    assert is_unrestricted("website.ck", rules) is False
    assert is_unrestricted("mail.website.ck", rules) is True


def test_longest_rule_prevails() -> None:
    rules = [["fukushima", "jp"], ["izumizaki", "fukushima", "jp"]]
    result = match("izumizaki.fukushima.jp", rules)
    assert result.prevailing_rule == ("izumizaki", "fukushima", "jp")
    assert result.is_restricted is True
    assert len(result.matched_rules) == 2


def test_equal_length_tie_keeps_first_rule() -> None:
    rules = [["*", "jp"], ["kyoto", "jp"]]
    result = match("kyoto.jp", rules)
    assert result.prevailing_rule == ("*", "jp")
    reordered = match("kyoto.jp", list(reversed(rules)))
    assert reordered.prevailing_rule == ("kyoto", "jp")


def test_empty_rules_never_match() -> None:
    assert is_unrestricted("website.com", []) is False
    assert is_unrestricted("website.com", [[]]) is False
    assert match("website.com", []) is None


def test_empty_rules_are_skipped() -> None:
    assert is_unrestricted("website.com", [[], [], ["com"], []]) is True


def test_invalid_syntax_returns_none() -> None:
    rules = [["com"]]
    for candidate in ["", ".com", "website.com.", "website..com", "my_site.com", "-a.com"]:
        assert match(candidate, rules) is None
        assert is_unrestricted(candidate, rules) is False


def test_no_applicable_rule_returns_none() -> None:
    assert match("site.jq", [["com"], ["*", "uk"]]) is None


def test_match_is_case_sensitive() -> None:
    assert match("example.COM", [["com"]]) is None


def test_match_is_idempotent() -> None:
    rules = [["com"], ["*", "ck"], ["!www", "ck"]]
    for host in ["yahoo.com", "www.ck", "mail.gov.ck"]:
        assert match(host, rules) == match(host, rules)


def test_match_does_not_mutate_rules() -> None:
    rules = [["*", "com"], ["!yahoo", "com"]]
    match("yahoo.com", rules)
    assert rules == [["*", "com"], ["!yahoo", "com"]]


def test_match_accepts_generator_rules() -> None:
    result = match("a.b.com", (rule for rule in [["com"], ["b", "com"]]))
    assert result.prevailing_rule == ("b", "com")
    assert result.is_restricted is False


def test_rule_matches_walks_from_tld() -> None:
    labels = ["mail", "yahoo", "com"]
    assert rule_matches(["com"], labels) is True
    assert rule_matches(["yahoo", "com"], labels) is True
    assert rule_matches(["*", "com"], labels) is True
    assert rule_matches(["*", "*", "com"], labels) is True
    assert rule_matches(["yahoo", "net"], labels) is False
    assert rule_matches(["google", "com"], labels) is False


def test_rule_longer_than_candidate_never_matches() -> None:
    assert rule_matches(["a", "b", "com"], ["b", "com"]) is False
    assert rule_matches(["*", "com"], ["com"]) is False
    assert rule_matches(["!yahoo", "com"], ["com"]) is False


def test_rule_matches_empty_inputs() -> None:
    assert rule_matches([], ["com"]) is False
    assert rule_matches(["com"], []) is False


def test_exception_marker_ends_the_walk() -> None:
    # Labels to the left of the marked one are never compared.
    assert rule_matches(["ignored", "!yahoo", "com"], ["yahoo", "com"]) is True
    assert rule_matches(["!yahoo", "com"], ["mail", "yahoo", "com"]) is True
    assert rule_matches(["!yahoo", "com"], ["google", "com"]) is False


def test_exception_marker_on_tld_position() -> None:
    assert rule_matches(["!com"], ["com"]) is True
    assert rule_matches(["!com"], ["net"]) is False


def test_is_exception_rule() -> None:
    assert is_exception_rule(["!www", "ck"]) is True
    assert is_exception_rule(["*", "ck"]) is False
    assert is_exception_rule([]) is False


def test_match_model_is_frozen_and_hashable() -> None:
    result = match("yahoo.com", [["com"]])
    with pytest.raises(ValidationError):
        result.is_restricted = True
    assert hash(result) == hash(match("yahoo.com", [["com"]]))


def test_match_model_rejects_foreign_prevailing_rule() -> None:
    with pytest.raises(ValidationError):
        Match(matched_rules=[["com"]], prevailing_rule=["net"], is_restricted=True)
