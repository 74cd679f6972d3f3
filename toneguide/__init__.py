"""ToneGuide: guideline-driven rewrites of UI strings in the brand voice."""

__version__ = "0.1.0"
