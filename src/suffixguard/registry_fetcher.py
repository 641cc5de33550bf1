from __future__ import annotations

from typing import Optional

import httpx

from .log import get_logger
from .models import DEFAULT_REGISTRY_URL, RuleSet

logger = get_logger(__name__)

COMMENT_PREFIX = "//"


class FetchError(Exception):
    """The online registry could not be downloaded or decoded."""


def parse_rules_text(text: str) -> RuleSet:
    """Parse the plain-text Public Suffix List format into rules."""
    rules = []
    for line in text.splitlines():
        line = line.strip()
        if not line or line.startswith(COMMENT_PREFIX):
            continue
        rules.append(tuple(line.split(".")))
    return tuple(rules)


def _rules_from_response(resp: httpx.Response) -> RuleSet:
    try:
        resp.raise_for_status()
    except httpx.HTTPStatusError as exc:
        raise FetchError(
            f"Non-successful response from registry: {resp.status_code}"
        ) from exc
    try:
        text = resp.content.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise FetchError("Registry response is not valid UTF-8") from exc
    rules = parse_rules_text(text)
    logger.info("Fetched %d rules from %s", len(rules), resp.request.url)
    return rules


def fetch_rules(
    url: str = DEFAULT_REGISTRY_URL,
    timeout_s: float = 10.0,
    client: Optional[httpx.Client] = None,
) -> RuleSet:
    try:
        if client is not None:
            resp = client.get(url, timeout=timeout_s)
        else:
            with httpx.Client(timeout=timeout_s, follow_redirects=True) as default_client:
                resp = default_client.get(url)
    except (httpx.HTTPError, httpx.InvalidURL) as exc:
        raise FetchError(f"Failed to download public suffix list: {exc}") from exc
    return _rules_from_response(resp)


async def fetch_rules_async(
    url: str = DEFAULT_REGISTRY_URL,
    timeout_s: float = 10.0,
    client: Optional[httpx.AsyncClient] = None,
) -> RuleSet:
    try:
        if client is not None:
            resp = await client.get(url, timeout=timeout_s)
        else:
            async with httpx.AsyncClient(
                timeout=timeout_s, follow_redirects=True
            ) as default_client:
                resp = await default_client.get(url)
    except (httpx.HTTPError, httpx.InvalidURL) as exc:
        raise FetchError(f"Failed to download public suffix list: {exc}") from exc
    return _rules_from_response(resp)
