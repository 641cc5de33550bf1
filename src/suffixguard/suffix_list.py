from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Iterable, Optional, Sequence, Union

import httpx

from . import matcher
from .log import get_logger
from .models import (
    DEFAULT_REGISTRY_URL,
    EmbeddedSource,
    FileSource,
    Match,
    OnlineRegistrySource,
    RuleSet,
    RulesSource,
    RuleSource,
    freeze_rules,
)
from .registry_fetcher import FetchError, fetch_rules, fetch_rules_async
from .rules_io import export_rules, load_embedded_rules, load_rules_file

logger = get_logger(__name__)


class PublicSuffixList:
    """Holds the current rule set as an immutable snapshot.

    Matching reads the snapshot once per call, so a concurrent update swapping
    in new rules never affects a match already in progress.
    """

    def __init__(self, rules: Iterable[Sequence[str]]) -> None:
        self._rules: RuleSet = freeze_rules(rules)
        self._update_lock = asyncio.Lock()

    @property
    def rules(self) -> RuleSet:
        return self._rules

    def replace_rules(self, rules: Iterable[Sequence[str]]) -> None:
        self._rules = freeze_rules(rules)

    @classmethod
    def from_source(
        cls,
        source: Optional[RuleSource] = None,
        client: Optional[httpx.Client] = None,
    ) -> "PublicSuffixList":
        """Build a list from ``source``, falling back to the bundled registry
        when a file or the online registry can't provide rules."""
        source = source or EmbeddedSource()
        if isinstance(source, RulesSource):
            return cls(source.rules)
        if isinstance(source, FileSource):
            return cls(_file_rules_or_embedded(source.path))
        if isinstance(source, OnlineRegistrySource):
            try:
                rules = fetch_rules(source.url, source.timeout_s, client=client)
            except FetchError as exc:
                logger.warning("Online registry unavailable, using embedded rules: %s", exc)
                rules = load_embedded_rules()
            return cls(rules)
        return cls(load_embedded_rules())

    @classmethod
    async def load(
        cls,
        source: Optional[RuleSource] = None,
        client: Optional[httpx.AsyncClient] = None,
    ) -> "PublicSuffixList":
        source = source or EmbeddedSource()
        if isinstance(source, RulesSource):
            return cls(source.rules)
        if isinstance(source, FileSource):
            rules = await asyncio.to_thread(_file_rules_or_embedded, source.path)
            return cls(rules)
        if isinstance(source, OnlineRegistrySource):
            try:
                rules = await fetch_rules_async(source.url, source.timeout_s, client=client)
            except FetchError as exc:
                logger.warning("Online registry unavailable, using embedded rules: %s", exc)
                rules = await asyncio.to_thread(load_embedded_rules)
            return cls(rules)
        return cls(await asyncio.to_thread(load_embedded_rules))

    def match(self, candidate: str) -> Optional[Match]:
        return matcher.match(candidate, self._rules)

    def is_unrestricted(self, candidate: str) -> bool:
        return matcher.is_unrestricted(candidate, self._rules)

    async def update_from_online_registry(
        self,
        url: str = DEFAULT_REGISTRY_URL,
        timeout_s: float = 10.0,
        client: Optional[httpx.AsyncClient] = None,
    ) -> bool:
        """Replace the rules with the online registry's current list.

        Returns False without fetching when another update is in flight, and
        False keeping the current rules when the download fails.
        """
        if self._update_lock.locked():
            return False
        async with self._update_lock:
            try:
                rules = await fetch_rules_async(url, timeout_s, client=client)
            except FetchError as exc:
                logger.warning("Public suffix list update failed: %s", exc)
                return False
            self._rules = rules
            logger.info("Public suffix list updated")
            return True

    def export(self, path: Union[str, Path]) -> None:
        export_rules(self._rules, path)


def _file_rules_or_embedded(path: str) -> RuleSet:
    rules = load_rules_file(path)
    if rules is None:
        logger.warning("Falling back to embedded rules")
        return load_embedded_rules()
    return rules
