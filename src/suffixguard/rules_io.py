from __future__ import annotations

import json
from functools import lru_cache
from pathlib import Path
from typing import Any, Iterable, List, Optional, Sequence, Union

from pydantic import TypeAdapter, ValidationError

from .log import get_logger
from .models import RuleSet, freeze_rules

logger = get_logger(__name__)

EMBEDDED_REGISTRY_PATH = Path(__file__).resolve().parent / "data" / "registry.json"

_rules_adapter = TypeAdapter(List[List[str]])


def decode_rules(payload: Any) -> RuleSet:
    """Validate a decoded JSON value as an array of string arrays."""
    return freeze_rules(_rules_adapter.validate_python(payload, strict=True))


@lru_cache(maxsize=1)
def load_embedded_rules() -> RuleSet:
    rules = decode_rules(json.loads(EMBEDDED_REGISTRY_PATH.read_text(encoding="utf-8")))
    logger.info("Loaded %d embedded rules from %s", len(rules), EMBEDDED_REGISTRY_PATH)
    return rules


def load_rules_file(path: Union[str, Path]) -> Optional[RuleSet]:
    rules_path = Path(path)
    try:
        rules = decode_rules(json.loads(rules_path.read_text(encoding="utf-8")))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError, ValidationError) as exc:
        logger.warning("Failed to load rules from %s: %s", rules_path, exc)
        return None
    logger.info("Loaded %d rules from %s", len(rules), rules_path)
    return rules


def export_rules(rules: Iterable[Sequence[str]], path: Union[str, Path]) -> None:
    payload = [list(rule) for rule in rules]
    Path(path).write_text(json.dumps(payload, ensure_ascii=True), encoding="utf-8")
