from __future__ import annotations

from typing import Annotated, Iterable, List, Literal, Sequence, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator

DEFAULT_REGISTRY_URL = "https://publicsuffix.org/list/public_suffix_list.dat"

# Leftmost label first, TLD last: ("*", "uk") is "*.uk".
Rule = Tuple[str, ...]
RuleSet = Tuple[Rule, ...]


def freeze_rules(rules: Iterable[Sequence[str]]) -> RuleSet:
    return tuple(tuple(rule) for rule in rules)


class Match(BaseModel):
    """Outcome of matching one candidate host against a rule set.

    ``matched_rules`` keeps the rule set's iteration order. ``prevailing_rule``
    is the first matched exception rule or, without one, the first rule of
    maximum length.
    """

    model_config = ConfigDict(frozen=True)

    matched_rules: Tuple[Rule, ...]
    prevailing_rule: Rule
    is_restricted: bool

    @model_validator(mode="after")
    def validate_prevailing(self) -> "Match":
        if self.prevailing_rule not in self.matched_rules:
            raise ValueError("prevailing_rule must be one of matched_rules")
        return self


class SourceBase(BaseModel):
    type: str


class EmbeddedSource(SourceBase):
    type: Literal["embedded"] = "embedded"


class RulesSource(SourceBase):
    type: Literal["rules"] = "rules"
    rules: List[List[str]]


class FileSource(SourceBase):
    type: Literal["file"] = "file"
    path: str


class OnlineRegistrySource(SourceBase):
    type: Literal["online_registry"] = "online_registry"
    url: str = DEFAULT_REGISTRY_URL
    timeout_s: float = 10.0

    @model_validator(mode="after")
    def validate_timeout(self) -> "OnlineRegistrySource":
        if self.timeout_s <= 0:
            raise ValueError("timeout_s must be positive")
        return self


RuleSource = Annotated[
    Union[
        EmbeddedSource,
        RulesSource,
        FileSource,
        OnlineRegistrySource,
    ],
    Field(discriminator="type"),
]
