"""Prompt building for variant generation."""

from toneguide.core.schemas_guidelines import Audience, Intent, Rule
from toneguide.core.schemas_rewrite import VARIANT_COUNT, GenerationRequest

# ruff: noqa: E501
REWRITE_SYSTEM_PROMPT = f"""You are a UX writer who rewrites short UI strings (buttons, tooltips, errors, labels, helper text, dialog titles) to match a brand voice and tone guide.

You MUST output ONLY valid JSON matching this exact schema:

{{
  "variants": [
    {{
      "text": "string - the rewritten UI string",
      "rationale": "string - one short sentence on why this rewrite fits the guide",
      "appliedRules": ["rule id", "..."]
    }}
  ]
}}

CRITICAL RULES:
1. Output ONLY the JSON object, no markdown, no explanation, no preamble.
2. Return EXACTLY {VARIANT_COUNT} variants, each meaningfully different from the others.
3. appliedRules MUST only contain rule ids shown in square brackets in the guidance.
4. User instructions override the general guidance when they conflict.
5. Keep the meaning of the original string. Do not invent features or facts."""


def build_generation_request(
    original_text: str,
    intent: Intent | str,
    audience: Audience | str,
    selected_rules: list[Rule],
    instructions: str | None = None,
) -> GenerationRequest:
    """
    Assemble a GenerationRequest, normalising blank instructions to None.

    Args:
        original_text: UI string to rewrite
        intent: Functional role of the string
        audience: Target reader class
        selected_rules: Output of select_rules(), already ordered and deduplicated
        instructions: Optional free-form override from the user

    Returns:
        GenerationRequest ready for build_rewrite_prompt()
    """
    cleaned_instructions = instructions.strip() if instructions else ""
    return GenerationRequest(
        original_text=original_text,
        intent=Intent(intent),
        audience=Audience(audience),
        instructions=cleaned_instructions or None,
        selected_rules=list(selected_rules),
    )


def build_rewrite_prompt(request: GenerationRequest) -> str:
    """
    Build the user prompt for variant generation.

    Args:
        request: GenerationRequest from build_generation_request()

    Returns:
        Formatted prompt string for the LLM
    """
    lines: list[str] = []

    # Input context
    lines.append("=== STRING CONTEXT ===")
    lines.append(f"intent: {request.intent.value}")
    lines.append(f"audience: {request.audience.value}")
    lines.append(f"length: {len(request.original_text)} characters")
    lines.append("original_text:")
    lines.append(request.original_text)
    lines.append("")

    # Guidance, one line per rule so the model can cite ids
    lines.append("=== BRAND GUIDANCE ===")
    if request.selected_rules:
        for rule in request.selected_rules:
            lines.append(f"[{rule.id}] ({rule.category.value}) {rule.text}")
    else:
        lines.append("(no specific guidance; follow general UX writing practice)")
    lines.append("")

    if request.instructions:
        lines.append("=== USER INSTRUCTIONS (HIGHEST PRIORITY) ===")
        lines.append("These instructions come from the designer and override the brand guidance above:")
        lines.append(request.instructions)
        lines.append("")

    # Output contract
    lines.append("=== OUTPUT ===")
    lines.append(f"Write exactly {VARIANT_COUNT} distinct rewrites of original_text.")
    lines.append("For each, give a short rationale and the list of rule ids you followed.")
    if request.selected_rules:
        lines.append("Citable rule ids: " + ", ".join(request.selected_rule_ids))
    lines.append('Respond with JSON only: {"variants": [{"text": ..., "rationale": ..., "appliedRules": [...]}]}')

    return "\n".join(lines)
