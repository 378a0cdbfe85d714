"""Category rule compilation and matching logic (core domain)."""

from __future__ import annotations

from dataclasses import dataclass
import re
from typing import Iterable, List, Optional

from smsledger.core.models import UNCATEGORIZED
from smsledger.core.patterns import CATEGORY_TABLE


@dataclass(frozen=True)
class CategoryRule:
    """Compiled category rule."""

    name: str
    pattern: re.Pattern
    match_body: bool


def build_category_rules(table: Iterable[tuple[str, str, bool]]) -> List[CategoryRule]:
    """Compile a (name, pattern, match_body) table, keeping its order."""

    return [
        CategoryRule(name=name, pattern=re.compile(pattern, re.IGNORECASE), match_body=match_body)
        for name, pattern, match_body in table
    ]


DEFAULT_RULES = build_category_rules(CATEGORY_TABLE)

CATEGORIES = [rule.name for rule in DEFAULT_RULES]


def classify(
    merchant: str,
    body: str = "",
    rules: Optional[Iterable[CategoryRule]] = None,
) -> str:
    """Return the first category whose pattern matches.

    Matching logic:
    - Rules are tried in declaration order and the first hit wins.
    - Every rule is tested against the lower-cased merchant.
    - Rules flagged ``match_body`` are also tested against the full body.
    """

    lowered_merchant = (merchant or "").lower()
    lowered_body = (body or "").lower()

    for rule in DEFAULT_RULES if rules is None else rules:
        if rule.pattern.search(lowered_merchant):
            return rule.name
        if rule.match_body and rule.pattern.search(lowered_body):
            return rule.name
    return UNCATEGORIZED
