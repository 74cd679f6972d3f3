"""Deterministic, network-free variant generator.

Used whenever the generation backend fails. The output is a pure function of
the original text: the same input always yields the same three variants.
"""

import re
from collections.abc import Callable

from toneguide.core.schemas_rewrite import VARIANT_COUNT, Variant, VariantSet

FALLBACK_RATIONALE_PREFIX = "Offline fallback"

EMPTY_TEXT_PLACEHOLDER = "Untitled"

# Order matters: longer phrases are removed before the words inside them
FILLER_PATTERNS = [
    r"\bclick here to\b",
    r"\bclick here\b",
    r"\bplease\b",
    r"\bkindly\b",
    r"\bsimply\b",
    r"\bjust\b",
    r"\bnow\b",
]

_FILLER_RE = re.compile("|".join(FILLER_PATTERNS), re.IGNORECASE)
_WS_RE = re.compile(r"\s+")
_TERMINAL = (".", "!", "?", "…")


def _collapse(text: str) -> str:
    return _WS_RE.sub(" ", text).strip()


def _sentence_case(text: str) -> str:
    if not text:
        return text
    return text[0].upper() + text[1:]


def _strip_terminal(text: str) -> str:
    return text.rstrip(" .!,;:")


def _tidy(text: str) -> str:
    tidied = _sentence_case(_collapse(text))
    if tidied and not tidied.endswith(_TERMINAL):
        tidied += "."
    return tidied


def _concise(text: str) -> str:
    trimmed = _collapse(_FILLER_RE.sub(" ", text))
    trimmed = _strip_terminal(trimmed.strip(" ,;:"))
    return _sentence_case(trimmed)


def _concise_sentence(text: str) -> str:
    concise = _concise(text)
    if not concise or concise.endswith(_TERMINAL):
        return concise
    return f"{concise}."


def _title(text: str) -> str:
    return " ".join(word[:1].upper() + word[1:] for word in _collapse(text).split(" "))


def _lower(text: str) -> str:
    return _strip_terminal(_collapse(text)).lower()


# (transform, rationale) in preference order
_PASSES: list[tuple[Callable[[str], str], str]] = [
    (_concise, "removed filler words and end punctuation for a direct label"),
    (_tidy, "normalised spacing, sentence case and end punctuation"),
    (_concise_sentence, "concise wording written as a full sentence"),
    (_title, "title case for emphasis"),
    (_lower, "lowercase, unpunctuated form"),
]


def generate_fallback_variants(original_text: str) -> VariantSet:
    """
    Produce three lightly transformed variants without calling a model.

    Each rationale starts with FALLBACK_RATIONALE_PREFIX and no rule ids are
    cited. Variants differing from the original are preferred; collisions
    are resolved deterministically so the three texts are always distinct.

    Args:
        original_text: UI string to rewrite

    Returns:
        VariantSet of exactly three variants
    """
    base = _collapse(original_text) or EMPTY_TEXT_PLACEHOLDER
    original = original_text.strip()

    candidates: list[tuple[str, str]] = []
    for transform, rationale in _PASSES:
        text = transform(base)
        if text:
            candidates.append((text, rationale))

    picked: list[tuple[str, str]] = []
    seen: set[str] = set()
    # First pass skips anything identical to the original
    for allow_original in (False, True):
        for text, rationale in candidates:
            if len(picked) == VARIANT_COUNT:
                break
            if text in seen or (not allow_original and text == original):
                continue
            seen.add(text)
            picked.append((text, rationale))

    suffix = 2
    while len(picked) < VARIANT_COUNT:
        text = f"{base} ({suffix})"
        suffix += 1
        if text not in seen:
            seen.add(text)
            picked.append((text, "numbered copy of the original"))

    return VariantSet(
        variants=[
            Variant(text=text, rationale=f"{FALLBACK_RATIONALE_PREFIX}: {rationale}.", applied_rules=[])
            for text, rationale in picked
        ]
    )