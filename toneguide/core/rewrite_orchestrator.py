"""Generation orchestrator: selection → prompt → model call → parse, with fallback.

State flow:
  idle → selecting → building → calling → parsing → done_remote
Any failure jumps straight to done_fallback. There is one external call and
no retry; a single failure produces the deterministic fallback variants.
"""

import asyncio
import logging
import time
from collections.abc import Callable
from datetime import datetime

from toneguide.chains.generate_variants import VariantGenerator
from toneguide.core.config import Settings, get_settings
from toneguide.core.errors import GenerationTimeoutError, TransportError
from toneguide.core.fallback import generate_fallback_variants
from toneguide.core.guidelines import RuleIndex
from toneguide.core.logging import get_logger, log_with_context
from toneguide.core.rewrite_inputs import (
    REWRITE_SYSTEM_PROMPT,
    build_generation_request,
    build_rewrite_prompt,
)
from toneguide.core.rule_selector import select_rules
from toneguide.core.schemas_guidelines import Audience, Intent
from toneguide.core.schemas_rewrite import (
    GenerationMode,
    GenerationResult,
    GenerationState,
    GenerationStatus,
    HistoryItem,
)
from toneguide.core.variant_parser import find_unknown_rule_ids, parse_variants
from toneguide.db.history import HistoryLedger

logger = get_logger(__name__)

StatusListener = Callable[[GenerationStatus], None]


class RewriteOrchestrator:
    """Runs one rewrite request end to end; never raises for generation failures."""

    def __init__(
        self,
        index: RuleIndex,
        generator: VariantGenerator | None,
        settings: Settings | None = None,
        on_status: StatusListener | None = None,
    ):
        self.index = index
        self.generator = generator
        self.settings = settings or get_settings()
        self.on_status = on_status

    async def generate(
        self,
        original_text: str,
        intent: Intent | str = Intent.GENERAL,
        audience: Audience | str = Audience.GENERAL,
        instructions: str | None = None,
    ) -> GenerationResult:
        """
        Generate three rewrite variants for a UI string.

        Args:
            original_text: UI string to rewrite
            intent: Functional role of the string
            audience: Target reader class
            instructions: Optional free-form override

        Returns:
            GenerationResult with exactly three variants; result.mode tells the
            caller whether they came from the model or the offline fallback
        """
        states: list[GenerationState] = [GenerationState.IDLE]
        selected_rule_ids: list[str] = []
        start = time.time()

        try:
            states.append(GenerationState.SELECTING)
            rules = select_rules(
                self.index, intent, audience, max_rules=self.settings.MAX_SELECTED_RULES
            )
            selected_rule_ids = [rule.id for rule in rules]

            states.append(GenerationState.BUILDING)
            request = build_generation_request(
                original_text, intent, audience, rules, instructions=instructions
            )
            user_prompt = build_rewrite_prompt(request)

            states.append(GenerationState.CALLING)
            if self.generator is None:
                raise TransportError("No generation backend configured")
            try:
                raw = await asyncio.wait_for(
                    self.generator(REWRITE_SYSTEM_PROMPT, user_prompt),
                    timeout=self.settings.GENERATION_TIMEOUT_SECONDS,
                )
            except GenerationTimeoutError:
                # Raised by the backend itself; keep its message
                raise
            except asyncio.TimeoutError as e:
                raise GenerationTimeoutError(
                    f"No response within {self.settings.GENERATION_TIMEOUT_SECONDS}s"
                ) from e

            states.append(GenerationState.PARSING)
            variants = parse_variants(raw)

        except asyncio.CancelledError:
            # Caller abandoned the request; nothing was persisted, let it unwind
            logger.info("Variant generation cancelled", extra={"state": states[-1].value})
            raise
        except Exception as e:
            states.append(GenerationState.DONE_FALLBACK)
            reason = f"{type(e).__name__}: {e}"
            logger.warning(
                f"Variant generation failed, using offline fallback: {reason}",
                extra={"failed_state": states[-2].value},
            )
            result = GenerationResult(
                variants=generate_fallback_variants(original_text),
                mode=GenerationMode.FALLBACK,
                dataset_version=self.index.dataset_version,
                selected_rule_ids=selected_rule_ids,
                states=states,
                error=reason,
            )
            self._emit(result, start)
            return result

        unknown = find_unknown_rule_ids(variants, self.index)
        if unknown:
            logger.info(
                "Model cited rule ids that are not in the corpus",
                extra={"unknown_rule_ids": sorted(unknown)},
            )

        states.append(GenerationState.DONE_REMOTE)
        result = GenerationResult(
            variants=variants,
            mode=GenerationMode.REMOTE,
            dataset_version=self.index.dataset_version,
            selected_rule_ids=selected_rule_ids,
            states=states,
        )
        self._emit(result, start)
        return result

    def _emit(self, result: GenerationResult, start: float) -> None:
        status = GenerationStatus(
            mode=result.mode,
            state=result.states[-1],
            reason=result.error,
            duration_ms=int((time.time() - start) * 1000),
        )
        log_with_context(
            logger,
            logging.INFO,
            f"Variant generation finished in {status.mode.value} mode",
            mode=status.mode.value,
            state=status.state.value,
            duration_ms=status.duration_ms,
        )
        if self.on_status is None:
            return
        try:
            self.on_status(status)
        except Exception as e:
            logger.error(f"Status listener failed: {e}")


def apply_history(
    ledger: HistoryLedger,
    index: RuleIndex,
    target_id: str,
    text: str,
    applied_at: datetime | None = None,
) -> list[HistoryItem]:
    """Record applied text for a target, tagged with the corpus's datasetVersion."""
    return ledger.append(target_id, text, index.dataset_version, applied_at=applied_at)
