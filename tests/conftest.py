"""Pytest configuration and fixtures."""

import os

# Settings are cached on first use, which happens at import time via get_logger()
os.environ["TONEGUIDE_ENV"] = "test"
os.environ["HISTORY_BACKEND"] = "memory"
os.environ.pop("ANTHROPIC_API_KEY", None)
os.environ.pop("GUIDELINES_PATH", None)

import pytest  # noqa: E402

from toneguide.core.config import get_settings  # noqa: E402
from toneguide.core.guidelines import RuleIndex, load_corpus  # noqa: E402

SAMPLE_CORPUS = {
    "datasetVersion": "v1.3",
    "rules": [
        {"id": "voice-01", "category": "voice", "audience": ["general"], "text": "Sound like a helpful colleague."},
        {"id": "general-01", "category": "general", "audience": ["general"], "text": "Use sentence case."},
        {"id": "general-02", "category": "general", "audience": ["end-user"], "text": "Prefer everyday words."},
        {"id": "cta-01", "category": "cta", "audience": ["general"], "text": "Start with a strong verb."},
        {"id": "cta-02", "category": "cta", "audience": ["end-user"], "text": "Keep it to four words or fewer."},
        {"id": "cta-03", "category": "cta", "audience": ["it-admin"], "text": "Name the object being changed."},
        {"id": "error-01", "category": "error", "audience": ["general"], "text": "Say what happened and how to fix it."},
        {"id": "tooltip-01", "category": "tooltip", "audience": ["it-admin", "end-user"], "text": "One short sentence."},
    ],
}


@pytest.fixture(scope="session", autouse=True)
def setup_test_env():
    """Start the session with settings read from the test environment."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def sample_corpus() -> dict:
    """Fresh copy of the sample corpus."""
    return {
        "datasetVersion": SAMPLE_CORPUS["datasetVersion"],
        "rules": [dict(rule) for rule in SAMPLE_CORPUS["rules"]],
    }


@pytest.fixture
def rule_index(sample_corpus) -> RuleIndex:
    """RuleIndex over the sample corpus."""
    return load_corpus(sample_corpus)
