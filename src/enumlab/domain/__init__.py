"""Domain layer — the tagged union engine and the unions built on it.

This layer depends only on the stdlib.
It must never import from services, commands, output, or config.
"""
