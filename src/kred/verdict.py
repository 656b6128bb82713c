"""
Result of a rule check.

The rule engine never raises for a rule violation: every check returns a Verdict,
and the orchestration layer (Game) decides whether that becomes an exception.
"""

from dataclasses import dataclass
from typing import Self


@dataclass(frozen=True)
class Verdict:
    legal: bool
    reason: str = ""

    @classmethod
    def ok(cls, reason: str = "") -> Self:
        return cls(True, reason)

    @classmethod
    def illegal(cls, reason: str) -> Self:
        return cls(False, reason)

    def __bool__(self) -> bool:
        return self.legal
