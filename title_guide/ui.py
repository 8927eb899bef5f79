"""Text rendering of assistant messages and field tips."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Mapping

from .guidance import GuidanceMessage, GuidanceResult
from .models import FieldTip
from .tone import Tone


@dataclass(slots=True)
class GuidanceCard:
    primary: GuidanceMessage
    secondary: List[GuidanceMessage]
    tone: Tone = Tone.NEUTRAL

    def render_text(self) -> str:
        lines = [
            f"[{self.primary.intent.value}] {self.primary.text}",
            f"  tone: {self.tone.value}",
        ]
        if self.primary.autofix is not None:
            fix = self.primary.autofix
            lines.append(f"  fix: {fix.label} (step {fix.target_step + 1})")
        if self.secondary:
            lines.append("  also:")
            for message in self.secondary:
                lines.append(f"    - [{message.intent.value}] {message.text}")
        return "\n".join(lines)


def build_card(result: GuidanceResult) -> GuidanceCard | None:
    if result.primary is None:
        return None
    return GuidanceCard(primary=result.primary, secondary=list(result.secondary), tone=result.tone)


def render_field_tips(tips: Mapping[str, FieldTip]) -> List[str]:
    rendered: List[str] = []
    for path, tip in tips.items():
        rendered.append(f"{path} ({tip.severity}): {tip.primary_tip}")
        if tip.secondary_tip:
            rendered.append(f"  {tip.secondary_tip}")
    return rendered
