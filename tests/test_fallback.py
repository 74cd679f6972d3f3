"""Tests for the deterministic offline variant generator."""

import pytest

from toneguide.core.fallback import (
    FALLBACK_RATIONALE_PREFIX,
    generate_fallback_variants,
)


class TestGenerateFallbackVariants:
    """Tests for generate_fallback_variants."""

    def test_cta_example(self) -> None:
        """Filler is removed and the three texts differ from the original."""
        original = "Click here to get started now please"
        result = generate_fallback_variants(original)

        assert result.texts == [
            "Get started",
            "Click here to get started now please.",
            "Get started.",
        ]
        assert original not in result.texts

    def test_marks_every_variant_as_fallback(self) -> None:
        """Rationales carry the fallback marker and no rules are cited."""
        result = generate_fallback_variants("Save changes")

        for variant in result.variants:
            assert variant.rationale.startswith(FALLBACK_RATIONALE_PREFIX)
            assert variant.applied_rules == []

    def test_is_deterministic(self) -> None:
        """Same input, same output."""
        assert generate_fallback_variants("  delete   file ") == generate_fallback_variants(
            "  delete   file "
        )

    @pytest.mark.parametrize(
        "original",
        ["OK", "", "   ", "please", "Save.", "Something went wrong!", "x" * 300],
    )
    def test_always_three_distinct_non_empty(self, original) -> None:
        """Edge inputs still give three distinct, non-empty texts."""
        result = generate_fallback_variants(original)

        assert len(result) == 3
        assert all(text.strip() for text in result.texts)
        assert len(set(result.texts)) == 3

    def test_prefers_texts_that_differ_from_original(self) -> None:
        """Variants identical to the original are used only as a last resort."""
        result = generate_fallback_variants("Get started")

        assert "Get started" not in result.texts
