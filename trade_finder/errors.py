from __future__ import annotations

from typing import Any, Dict, Optional

# =============================================================================
# Error codes
# =============================================================================

INVALID_INPUT = "INVALID_INPUT"
INVALID_OBJECTIVE = "INVALID_OBJECTIVE"
INVALID_MODE = "INVALID_MODE"
INVALID_PRESET = "INVALID_PRESET"
INVALID_GOAL = "INVALID_GOAL"
TARGET_REQUIRED = "TARGET_REQUIRED"


class TradeFinderError(Exception):
    """Input-contract failure raised by parsers and the HTTP adapter.

    The engine itself never raises for "no good trade exists"; it degrades to
    fewer candidates plus fallback opportunities.
    """

    def __init__(self, code: str, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = dict(details or {})

    def __repr__(self) -> str:
        return f"TradeFinderError(code={self.code!r}, message={self.message!r})"
