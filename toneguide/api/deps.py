"""FastAPI dependencies wiring the core services."""

from functools import lru_cache

from toneguide.chains.generate_variants import AnthropicVariantGenerator, VariantGenerator
from toneguide.core.config import get_settings
from toneguide.core.guidelines import RuleIndex, get_rule_index
from toneguide.core.logging import get_logger
from toneguide.core.rewrite_orchestrator import RewriteOrchestrator
from toneguide.db.history import HistoryLedger
from toneguide.db.kv_store import InMemoryKeyValueStore, KeyValueStore, SupabaseKeyValueStore

logger = get_logger(__name__)


def get_index() -> RuleIndex:
    """Loaded rule index; a LoadError here is fatal for the request."""
    return get_rule_index()


@lru_cache(maxsize=1)
def get_generator() -> VariantGenerator | None:
    settings = get_settings()
    if not settings.ANTHROPIC_API_KEY:
        logger.warning("ANTHROPIC_API_KEY not set, rewrites will use the offline fallback")
        return None
    return AnthropicVariantGenerator(settings)


def get_orchestrator() -> RewriteOrchestrator:
    return RewriteOrchestrator(index=get_index(), generator=get_generator())


@lru_cache(maxsize=1)
def _get_store() -> KeyValueStore:
    settings = get_settings()
    if settings.HISTORY_BACKEND == "supabase":
        return SupabaseKeyValueStore()
    return InMemoryKeyValueStore()


@lru_cache(maxsize=1)
def get_history_ledger() -> HistoryLedger:
    return HistoryLedger(_get_store(), capacity=get_settings().HISTORY_CAPACITY)
