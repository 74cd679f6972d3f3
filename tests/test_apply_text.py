"""Tests for applying accepted variants to host targets."""

from unittest.mock import MagicMock

import pytest

from toneguide.core.apply_text import (
    NOT_A_TEXT_TARGET_MESSAGE,
    TARGET_NOT_FOUND_MESSAGE,
    InMemoryTextTargetStore,
    TextTarget,
    apply_variant,
)
from toneguide.db.history import HistoryLedger
from toneguide.db.kv_store import InMemoryKeyValueStore


@pytest.fixture
def targets() -> InMemoryTextTargetStore:
    return InMemoryTextTargetStore(
        [
            TextTarget(target_id="42", kind="text", text="Click here"),
            TextTarget(target_id="7", kind="frame"),
        ]
    )


@pytest.fixture
def ledger() -> HistoryLedger:
    return HistoryLedger(InMemoryKeyValueStore())


class TestApplyVariant:
    def test_success_updates_text_and_history(self, targets, ledger, rule_index):
        """Text is replaced and recorded with the dataset version."""
        result = apply_variant(targets, ledger, rule_index, "42", "Get started")

        assert result.ok
        assert result.error is None
        assert targets.get_target("42").text == "Get started"
        assert [(i.text, i.dataset_version) for i in ledger.recent("42")] == [("Get started", "v1.3")]

    def test_missing_target(self, targets, ledger, rule_index):
        """Missing targets report the not-found message and write no history."""
        result = apply_variant(targets, ledger, rule_index, "999", "Get started")

        assert not result.ok
        assert result.error == TARGET_NOT_FOUND_MESSAGE
        assert ledger.recent("999") == []

    def test_non_text_target(self, targets, ledger, rule_index):
        """Non-text targets are rejected."""
        result = apply_variant(targets, ledger, rule_index, "7", "Get started")

        assert not result.ok
        assert result.error == NOT_A_TEXT_TARGET_MESSAGE
        assert ledger.recent("7") == []

    def test_write_failure(self, ledger, rule_index):
        """A failing host write is reported and not recorded."""
        store = MagicMock()
        store.get_target.return_value = TextTarget(target_id="42", kind="text")
        store.set_text.side_effect = RuntimeError("font not loaded")

        result = apply_variant(store, ledger, rule_index, "42", "Get started")

        assert not result.ok
        assert result.error == "Failed to apply text: font not loaded"
        assert ledger.recent("42") == []

    def test_history_failure_does_not_fail_apply(self, targets, rule_index):
        """The text stays applied even if history can't be saved."""
        ledger = MagicMock()
        ledger.append.side_effect = RuntimeError("store down")

        result = apply_variant(targets, ledger, rule_index, "42", "Get started")

        assert result.ok
        assert targets.get_target("42").text == "Get started"
