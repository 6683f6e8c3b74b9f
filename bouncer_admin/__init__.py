"""Text-command admin console for a multi-user IRC bouncer."""

__version__ = "0.1.0"
