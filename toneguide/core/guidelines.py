"""Guideline repository: loads and indexes the versioned rule corpus.

The index is built once per process and is read-only afterwards, so it can be
shared by any number of concurrent selections.
"""

import json
from collections import Counter
from functools import lru_cache
from pathlib import Path
from typing import Any, Iterator

from pydantic import ValidationError

from toneguide.core.config import get_settings
from toneguide.core.errors import LoadError
from toneguide.core.logging import get_logger
from toneguide.core.schemas_guidelines import (
    Audience,
    GuidelineCorpus,
    GuidelineSummary,
    Rule,
    RuleCategory,
)

logger = get_logger(__name__)

BUNDLED_CORPUS_PATH = Path(__file__).resolve().parent.parent / "data" / "guidelines.json"


class RuleIndex:
    """Read-only, category-indexed view over one loaded corpus."""

    def __init__(self, dataset_version: str, rules: list[Rule]):
        self._dataset_version = dataset_version
        self._rules: tuple[Rule, ...] = tuple(rules)
        self._by_id: dict[str, Rule] = {rule.id: rule for rule in self._rules}
        by_category: dict[RuleCategory, list[Rule]] = {}
        for rule in self._rules:
            by_category.setdefault(rule.category, []).append(rule)
        self._by_category: dict[RuleCategory, tuple[Rule, ...]] = {
            category: tuple(items) for category, items in by_category.items()
        }

    @property
    def dataset_version(self) -> str:
        return self._dataset_version

    @property
    def rule_ids(self) -> list[str]:
        return [rule.id for rule in self._rules]

    def __len__(self) -> int:
        return len(self._rules)

    def __iter__(self) -> Iterator[Rule]:
        return iter(self._rules)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, RuleIndex):
            return NotImplemented
        return self._dataset_version == other._dataset_version and self._rules == other._rules

    def get(self, rule_id: str) -> Rule | None:
        return self._by_id.get(rule_id)

    def rules_for(
        self,
        category: RuleCategory | str,
        audience: Audience | str | None = None,
    ) -> list[Rule]:
        """
        Rules in a category, in corpus order.

        Args:
            category: Category to look up
            audience: Optional audience filter; a rule matches if it targets
                this audience or is tagged "general"

        Returns:
            Matching rules (empty list for a category with no rules)
        """
        category = RuleCategory(category)
        if audience is not None:
            audience = Audience(audience)
        return [
            rule for rule in self._by_category.get(category, ()) if rule.applies_to(audience)
        ]

    def summary(self) -> GuidelineSummary:
        counts = Counter(rule.category.value for rule in self._rules)
        return GuidelineSummary(
            dataset_version=self._dataset_version,
            rule_count=len(self._rules),
            categories=dict(sorted(counts.items())),
        )


def load_corpus(corpus: dict[str, Any]) -> RuleIndex:
    """
    Validate a corpus document and build its index.

    Args:
        corpus: Parsed corpus with top-level "datasetVersion" and "rules"

    Returns:
        RuleIndex over the corpus

    Raises:
        LoadError: If the corpus is malformed (missing id, unknown category,
            duplicate id, ...)
    """
    if not isinstance(corpus, dict):
        raise LoadError(f"Corpus must be an object, got {type(corpus).__name__}")

    try:
        parsed = GuidelineCorpus.model_validate(corpus)
    except ValidationError as e:
        raise LoadError(f"Invalid guideline corpus: {e}") from e

    counts = Counter(rule.id for rule in parsed.rules)
    duplicates = sorted(rule_id for rule_id, n in counts.items() if n > 1)
    if duplicates:
        raise LoadError(f"Duplicate rule ids in corpus: {', '.join(duplicates)}")

    logger.info(
        f"Loaded guideline corpus {parsed.dataset_version}",
        extra={"rule_count": len(parsed.rules)},
    )
    return RuleIndex(parsed.dataset_version, parsed.rules)


def load_corpus_file(path: str | Path) -> RuleIndex:
    """
    Load a corpus from a JSON file.

    Raises:
        LoadError: If the file can't be read, isn't JSON, or is malformed
    """
    path = Path(path)
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise LoadError(f"Cannot read guideline corpus at {path}: {e}") from e

    try:
        corpus = json.loads(raw)
    except json.JSONDecodeError as e:
        raise LoadError(f"Guideline corpus at {path} is not valid JSON: {e}") from e

    return load_corpus(corpus)


@lru_cache(maxsize=1)
def get_rule_index() -> RuleIndex:
    """
    Get the process-wide rule index (loaded once, cached).

    Raises:
        LoadError: If the configured corpus is malformed
    """
    settings = get_settings()
    path = Path(settings.GUIDELINES_PATH) if settings.GUIDELINES_PATH else BUNDLED_CORPUS_PATH
    return load_corpus_file(path)
