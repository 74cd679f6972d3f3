"""Rule selection: map an (intent, audience) pair to a compact rule set."""

from toneguide.core.guidelines import RuleIndex
from toneguide.core.schemas_guidelines import (
    BRAND_WIDE_CATEGORIES,
    Audience,
    Intent,
    Rule,
    RuleCategory,
)

DEFAULT_MAX_RULES = 6


def select_rules(
    index: RuleIndex,
    intent: Intent | str,
    audience: Audience | str,
    max_rules: int = DEFAULT_MAX_RULES,
) -> list[Rule]:
    """
    Select the rules to render into a rewrite prompt.

    Deterministic selection:
    - Category rules for the intent come first, in corpus order
    - Brand-wide voice/general rules are always appended
    - Duplicates are removed by id, keeping the first occurrence
    - The result is truncated to max_rules, keeping at least one brand-wide
      rule when there is room for two or more

    Args:
        index: Loaded rule index
        intent: Functional role of the string
        audience: Target reader class
        max_rules: Upper bound on returned rules

    Returns:
        Ordered, duplicate-free list of at most max_rules rules
    """
    if max_rules < 1:
        raise ValueError(f"max_rules must be >= 1, got {max_rules}")

    intent = Intent(intent)
    audience = Audience(audience)

    candidates = list(index.rules_for(RuleCategory(intent.value), audience))
    brand_wide: list[Rule] = []
    for category in BRAND_WIDE_CATEGORIES:
        brand_wide.extend(index.rules_for(category, audience))
    candidates.extend(brand_wide)

    selected: list[Rule] = []
    seen: set[str] = set()
    for rule in candidates:
        if rule.id in seen:
            continue
        seen.add(rule.id)
        selected.append(rule)

    if len(selected) <= max_rules:
        return selected

    truncated = selected[:max_rules]
    if brand_wide and max_rules >= 2 and not any(r.is_brand_wide for r in truncated):
        # Category rules filled the bound; the last slot goes to brand voice
        truncated[-1] = brand_wide[0]
    return truncated
