"""enumlab — tagged unions with exhaustive matching, and an account state machine."""

__version__ = "0.1.0"
