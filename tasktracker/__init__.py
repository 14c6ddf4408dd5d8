"""Personal task tracker: token-gated task API and its client core."""

__version__ = "0.1.0"
