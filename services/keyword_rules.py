"""Keyword rules for categorizing transactions without asking the user.

Rules live in a YAML file::

    version: 1
    settings:
      auto_categorize: true
    rules:
      - keywords: [netflix]
        category: ENTERTAINMENT
      - keywords: [shoppers, drug]
        category: PHARMACY
        match_all: true

Rules are evaluated in file order and the first match wins.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import FrozenSet, List, Optional

import yaml

from errors import InvalidCategoryName
from logger import get_logger
from models.category import validate_category_name

logger = get_logger(__name__)


@dataclass
class KeywordRule:
    keywords: List[str]
    category: str
    match_all: bool = False

    def matches(self, tokens: FrozenSet[str]) -> bool:
        if not self.keywords or not tokens:
            return False
        keywords = [k.lower() for k in self.keywords]
        if self.match_all:
            return all(k in tokens for k in keywords)
        return any(k in tokens for k in keywords)


@dataclass
class KeywordRules:
    rules: List[KeywordRule] = field(default_factory=list)
    auto_categorize: bool = True
    version: int = 1

    @classmethod
    def empty(cls) -> "KeywordRules":
        return cls()

    def find_matching_category(self, tokens: FrozenSet[str]) -> Optional[str]:
        """Name of the category of the first rule that matches, or None."""
        if not tokens:
            return None
        for rule in self.rules:
            if rule.matches(tokens):
                return rule.category
        return None

    def find_rules_by_category(self, category_name: str) -> List[KeywordRule]:
        if not category_name or not category_name.strip():
            return []
        wanted = category_name.strip().upper()
        return [r for r in self.rules if r.category.strip().upper() == wanted]


def parse_keyword_rules(text: str) -> KeywordRules:
    """Parse keyword rules from a YAML string.

    Raises:
        yaml.YAMLError: If the YAML is invalid.
        ValueError: If the document has the wrong shape.
    """
    data = yaml.safe_load(text)
    if data is None:
        return KeywordRules.empty()
    if not isinstance(data, dict):
        raise ValueError("Keyword rules must be a mapping")

    settings = data.get("settings") or {}
    rules = []
    for entry in data.get("rules") or []:
        keywords = entry.get("keywords") or []
        category = entry.get("category")
        if not keywords or not category:
            logger.warning(f"Ignoring incomplete keyword rule: {entry}")
            continue
        try:
            category = validate_category_name(str(category))
        except InvalidCategoryName as e:
            logger.warning(f"Ignoring keyword rule for {category!r}: {e}")
            continue
        rules.append(
            KeywordRule(
                keywords=[str(k) for k in keywords],
                category=category,
                match_all=bool(entry.get("match_all", False)),
            )
        )

    return KeywordRules(
        rules=rules,
        auto_categorize=bool(settings.get("auto_categorize", True)),
        version=int(data.get("version", 1)),
    )


def load_keyword_rules(path: Optional[Path]) -> KeywordRules:
    """Load keyword rules from a file.

    A missing, empty or invalid file yields an empty rule set.
    """
    if path is None:
        logger.debug("Keyword rules path is not set, using no rules")
        return KeywordRules.empty()

    path = Path(path)
    if not path.exists():
        logger.debug(f"Keyword rules file does not exist: {path}")
        return KeywordRules.empty()

    try:
        rules = parse_keyword_rules(path.read_text())
    except (OSError, yaml.YAMLError, ValueError, AttributeError) as e:
        logger.error(f"Failed to load keyword rules from {path}: {e}")
        return KeywordRules.empty()

    logger.info(f"Loaded {len(rules.rules)} keyword rule(s) from {path}")
    return rules
