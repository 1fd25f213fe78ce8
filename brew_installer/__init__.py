"""Homebrew installer for macOS (idempotent, fail-fast).

Core design goals:
- One marker file decides whether anything runs at all
- Strictly sequential stages, first failure stops the run
- Every external command logged with its output
- Constants injected through config so tests never touch /usr/local
"""

__all__ = []
