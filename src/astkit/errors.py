from __future__ import annotations

from typing import Optional

# ---------- Exceptions (keep Astkit* rooted at AstkitError) ----------

class AstkitError(Exception):
    pass

class KindMismatch(AstkitError, TypeError):
    """Raised by kind assertions when a value is not of the asserted kind."""

    def __init__(self, expected: str, actual: Optional[str]):
        shown = actual if actual is not None else "non-node value"
        super().__init__(f"Expected {expected}, got {shown}")
        self.expected = expected
        self.actual = actual

class MalformedNode(AstkitError):
    def __init__(self, message: str, kind: Optional[str] = None):
        super().__init__(f"{kind}: {message}" if kind else message)
        self.kind = kind

class UnknownKind(AstkitError, KeyError):
    def __init__(self, kind: str):
        super().__init__(kind)
        self.kind = kind

    def __str__(self) -> str:
        return f"Unknown node kind '{self.kind}'"
