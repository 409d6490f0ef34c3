"""Result structures shared by the readers and the conversion runner.

Readers return a ``ParseOutcome``; the runner wraps it, together with the
rendered text, into a ``ConversionResult``.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List

from .schemas import Hand, SkippedHandInfo


@dataclass
class ParseOutcome:
    """Hands reconstructed from one input plus the hands left out."""

    hands: List[Hand] = field(default_factory=list)
    skipped: List[SkippedHandInfo] = field(default_factory=list)

    @property
    def skipped_hands(self) -> int:
        return len(self.skipped)


@dataclass
class ConversionResult:
    """Canonical representation of one conversion call."""

    text: str
    input_format: str
    hands: List[Hand] = field(default_factory=list)
    skipped_hands_info: List[SkippedHandInfo] = field(default_factory=list)

    @property
    def skipped_hands(self) -> int:
        return len(self.skipped_hands_info)

    def to_dict(self, include_hands: bool = False) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "input_format": self.input_format,
            "hand_count": len(self.hands),
            "skipped_hands": self.skipped_hands,
            "skipped_hands_info": [info.to_dict() for info in self.skipped_hands_info],
        }

        if include_hands:
            payload["hands"] = [hand.model_dump(mode="json") for hand in self.hands]

        return payload
