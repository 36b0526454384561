"""Turn meeting transcripts into structured markdown reports."""

__version__ = "0.1.0"
