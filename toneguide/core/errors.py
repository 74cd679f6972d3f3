"""Error taxonomy for the rewrite pipeline.

Only LoadError is allowed to abort a request: without a rule corpus there is
nothing to fall back on. Everything raised while generating is absorbed by the
orchestrator and turned into a fallback result.
"""


class ToneGuideError(Exception):
    """Base class for ToneGuide errors."""


class LoadError(ToneGuideError):
    """Raised when a guideline corpus is structurally invalid."""


class ParseError(ToneGuideError):
    """Raised when a generation response cannot be turned into a VariantSet."""


class TransportError(ToneGuideError):
    """Raised when the generation backend is unreachable or answers non-2xx."""


class GenerationTimeoutError(ToneGuideError, TimeoutError):
    """Raised when the generation backend does not answer within the timeout."""


class TargetNotFoundError(ToneGuideError):
    """Raised by the apply action when the target no longer exists."""


class NotATextTargetError(ToneGuideError):
    """Raised by the apply action when the target cannot hold text."""
