"""Parse and validate generation responses into VariantSets."""

import json
from typing import Any

from toneguide.core.errors import ParseError
from toneguide.core.guidelines import RuleIndex
from toneguide.core.llm import parse_llm_json_dict
from toneguide.core.logging import get_logger
from toneguide.core.schemas_rewrite import VARIANT_COUNT, Variant, VariantSet

logger = get_logger(__name__)


def parse_variants(raw_response: str | dict[str, Any]) -> VariantSet:
    """
    Parse a raw generation response into exactly three variants.

    Nothing is repaired except a missing appliedRules list, which defaults
    to empty. Cited rule ids are kept verbatim.

    Args:
        raw_response: Raw model text (optionally fenced) or already-decoded JSON

    Returns:
        Validated VariantSet

    Raises:
        ParseError: On malformed JSON, a missing/invalid variants field, a
            count other than three, or an empty text/rationale
    """
    if isinstance(raw_response, str):
        try:
            payload = parse_llm_json_dict(raw_response)
        except json.JSONDecodeError as e:
            logger.warning(
                f"JSON parsing failed: {e}",
                extra={"output_preview": raw_response[:200]},
            )
            raise ParseError(f"Response is not valid JSON: {e}") from e
    else:
        payload = raw_response

    if not isinstance(payload, dict):
        raise ParseError(f"Response must be a JSON object, got {type(payload).__name__}")

    if "variants" not in payload:
        raise ParseError("Response has no 'variants' field")

    items = payload["variants"]
    if not isinstance(items, list):
        raise ParseError("'variants' must be a list")
    if len(items) != VARIANT_COUNT:
        raise ParseError(f"Expected {VARIANT_COUNT} variants, got {len(items)}")

    variants = [_parse_variant(item, position) for position, item in enumerate(items)]
    return VariantSet(variants=variants)


def _parse_variant(item: Any, position: int) -> Variant:
    if not isinstance(item, dict):
        raise ParseError(f"Variant {position} must be an object")

    text = item.get("text")
    rationale = item.get("rationale")
    if not isinstance(text, str) or not text.strip():
        raise ParseError(f"Variant {position} has no text")
    if not isinstance(rationale, str) or not rationale.strip():
        raise ParseError(f"Variant {position} has no rationale")

    applied = item.get("appliedRules", item.get("applied_rules"))
    if applied is None:
        applied = []
    if not isinstance(applied, list) or not all(isinstance(r, str) for r in applied):
        raise ParseError(f"Variant {position} appliedRules must be a list of rule ids")

    return Variant(text=text.strip(), rationale=rationale.strip(), applied_rules=list(applied))


def find_unknown_rule_ids(variant_set: VariantSet, index: RuleIndex) -> set[str]:
    """Cited rule ids that don't exist in the loaded corpus."""
    cited = {rule_id for variant in variant_set.variants for rule_id in variant.applied_rules}
    return {rule_id for rule_id in cited if index.get(rule_id) is None}
