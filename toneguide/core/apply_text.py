"""Apply an accepted variant to a host target and record it in history.

The host supplies the TextTargetStore. Text is written first; history is only
appended after the write succeeds, never during generation.
"""

from dataclasses import dataclass
from typing import Protocol

from toneguide.core.errors import NotATextTargetError, TargetNotFoundError
from toneguide.core.guidelines import RuleIndex
from toneguide.core.logging import get_logger
from toneguide.core.rewrite_orchestrator import apply_history
from toneguide.core.schemas_rewrite import ApplyResult
from toneguide.db.history import HistoryLedger

logger = get_logger(__name__)

TARGET_NOT_FOUND_MESSAGE = "Target not found. It may have been deleted."
NOT_A_TEXT_TARGET_MESSAGE = "Selected target is not a text layer."


@dataclass
class TextTarget:
    """Host-side object that may hold text."""

    target_id: str
    kind: str
    text: str = ""

    @property
    def is_text(self) -> bool:
        return self.kind == "text"


class TextTargetStore(Protocol):
    """Caller-side text mutation contract."""

    def get_target(self, target_id: str) -> TextTarget | None: ...

    def set_text(self, target_id: str, text: str) -> None: ...


class InMemoryTextTargetStore:
    """Dict-backed TextTargetStore for local runs and tests."""

    def __init__(self, targets: list[TextTarget] | None = None):
        self.targets: dict[str, TextTarget] = {t.target_id: t for t in targets or []}

    def get_target(self, target_id: str) -> TextTarget | None:
        return self.targets.get(target_id)

    def set_text(self, target_id: str, text: str) -> None:
        target = self.targets.get(target_id)
        if target is None:
            raise TargetNotFoundError(target_id)
        target.text = text


def _resolve_text_target(store: TextTargetStore, target_id: str) -> TextTarget:
    target = store.get_target(target_id)
    if target is None:
        raise TargetNotFoundError(TARGET_NOT_FOUND_MESSAGE)
    if not target.is_text:
        raise NotATextTargetError(NOT_A_TEXT_TARGET_MESSAGE)
    return target


def apply_variant(
    store: TextTargetStore,
    ledger: HistoryLedger,
    index: RuleIndex,
    target_id: str,
    text: str,
) -> ApplyResult:
    """
    Replace a target's text, then record it in the history ledger.

    Returns:
        ApplyResult(ok=True) on success; ok=False with a user-facing error
        message if the target is missing, isn't text, or the write fails
    """
    try:
        _resolve_text_target(store, target_id)
        store.set_text(target_id, text)
    except (TargetNotFoundError, NotATextTargetError) as e:
        logger.warning(f"Cannot apply text to target {target_id}: {e}")
        return ApplyResult(ok=False, error=str(e))
    except Exception as e:
        logger.error(f"Error applying text to target {target_id}: {e}")
        return ApplyResult(ok=False, error=f"Failed to apply text: {e}")

    try:
        apply_history(ledger, index, target_id, text)
    except Exception as e:
        # Text is already on the target; a lost history entry is not a failed apply
        logger.error(f"Error saving history for target {target_id}: {e}")
    return ApplyResult(ok=True)
