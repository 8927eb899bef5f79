"""Plain-text readiness report for a submission draft."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List

from .intents import evaluate_form
from .models import FormSnapshot
from .validation import STEP_NAMES, compute_step_validation


@dataclass(slots=True)
class Report:
    title: str
    summary_lines: List[str]

    def render_text(self) -> str:
        return "\n".join([self.title, "-" * len(self.title), *self.summary_lines])


def readiness_report(snapshot: FormSnapshot) -> Report:
    evaluation = evaluate_form(snapshot)
    validation = compute_step_validation(snapshot)
    name = snapshot.core.title.strip() or "Untitled"
    lines = [
        f"Confidence: {evaluation.confidence}%",
        f"Completion: {validation.completion_percent}%",
    ]
    for step_name, step in zip(STEP_NAMES, validation.steps):
        mark = "ok" if step.valid else "todo"
        lines.append(f"- {step_name}: {step.met}/{step.total} [{mark}]")
    if evaluation.blockers:
        lines.append("Blockers: " + ", ".join(intent.value for intent in evaluation.blockers))
    if evaluation.warnings:
        lines.append("Warnings: " + ", ".join(intent.value for intent in evaluation.warnings))
    lines.append(f"Next action: {evaluation.next_best_action or 'Ready to submit'}")
    return Report(title=f"Readiness: {name}", summary_lines=lines)
