"""Command-line front end for the title submission guidance engine."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

from title_guide.chatbot import IntentMatcher
from title_guide.chatbot.knowledge_base import INTENTS
from title_guide.config import GuidanceConfig, HelpDeskConfig
from title_guide.field_tips import evaluate_field_tips
from title_guide.guidance import GuidanceLoop, GuidanceResult
from title_guide.helpdesk import HelpDesk, entries_from_intents, validate_question
from title_guide.intents import evaluate_form, select_intent
from title_guide.memory import AssistantMemory
from title_guide.models import FormSnapshot
from title_guide.reporting import readiness_report
from title_guide.snapshot import snapshot_from_dict
from title_guide.store import FormStore
from title_guide.ui import build_card, render_field_tips
from title_guide.validation import STEP_NAMES

logger = logging.getLogger(__name__)


def load_snapshot(path: Path) -> FormSnapshot:
    payload = json.loads(path.read_text(encoding="utf-8"))
    return snapshot_from_dict(payload)


def _mtime(path: Path) -> float:
    try:
        return path.stat().st_mtime
    except OSError:
        return 0.0


def check_command(path: Path, *, step: Optional[int]) -> int:
    snapshot = load_snapshot(path)
    evaluation = evaluate_form(snapshot)
    selection = select_intent(evaluation, AssistantMemory())
    print(readiness_report(snapshot).render_text())
    print()
    if selection is None:
        print("Assistant: (nothing to say)")
    else:
        secondary = ", ".join(intent.value for intent in selection.secondary) or "none"
        print(f"Assistant: {selection.primary.value} (secondary: {secondary})")
    steps = range(len(STEP_NAMES)) if step is None else [step]
    for index in steps:
        lines = render_field_tips(evaluate_field_tips(snapshot, index))
        if not lines:
            continue
        print(f"\nTips for {STEP_NAMES[index]}:")
        for line in lines:
            print(f"  {line}")
    return 0


def print_result(result: GuidanceResult) -> None:
    if result.thinking:
        print("  ...thinking")
        return
    card = build_card(result)
    if card is not None:
        print(card.render_text())
        print()


async def watch_loop(path: Path, *, interval: float, config: GuidanceConfig) -> None:
    store = FormStore(load_snapshot(path))
    memory = AssistantMemory()
    guidance = GuidanceLoop(
        store.snapshot,
        memory,
        asyncio.get_running_loop(),
        on_update=print_result,
        config=config,
    )
    unsubscribe = store.subscribe(lambda _snapshot: guidance.notify_change())
    last_mtime = _mtime(path)
    guidance.start()
    logger.info("Watching %s every %.1fs", path, interval)
    try:
        while True:
            await asyncio.sleep(interval)
            mtime = _mtime(path)
            if mtime == last_mtime:
                continue
            last_mtime = mtime
            try:
                snapshot = load_snapshot(path)
            except (OSError, ValueError) as exc:
                logger.warning("Skipping unreadable snapshot %s: %s", path, exc)
                continue
            store.replace(snapshot)
    finally:
        unsubscribe()
        guidance.stop()


def watch_command(path: Path, *, interval: float) -> int:
    try:
        asyncio.run(watch_loop(path, interval=interval, config=GuidanceConfig.from_env()))
    except KeyboardInterrupt:
        print("\nStopped watching.")
    return 0


def chat_command(message: Optional[str]) -> int:
    matcher = IntentMatcher()
    if message is not None:
        result = matcher.match(message)
        print(f"[{result.intent} {result.confidence:.1f}] {result.answer}")
        return 0
    print("Ask about the submission form. Empty line or Ctrl-D to quit.")
    while True:
        try:
            line = input("> ")
        except EOFError:
            print()
            break
        if not line.strip():
            break
        result = matcher.match(line)
        print(f"[{result.intent} {result.confidence:.1f}] {result.answer}")
    return 0


def help_command(question: str, *, seed: bool) -> int:
    try:
        validate_question(question)
    except ValueError as exc:
        sys.stderr.write(f"{exc}\n")
        return 2
    desk = HelpDesk(config=HelpDeskConfig.from_env())
    try:
        if seed and desk.knowledge_base.count() == 0:
            desk.knowledge_base.bulk_add(entries_from_intents(INTENTS))
        answer = desk.answer(question)
    finally:
        desk.close()
    print(f"[{answer.source}] {answer.answer}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Guidance engine for title submissions")
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    check = sub.add_parser("check", help="Evaluate a saved form snapshot once")
    check.add_argument("snapshot", type=Path, help="JSON file holding the form state")
    check.add_argument("--step", type=int, choices=range(len(STEP_NAMES)), help="Only show tips for this step")

    watch = sub.add_parser("watch", help="Re-evaluate a snapshot file whenever it changes")
    watch.add_argument("snapshot", type=Path, help="JSON file holding the form state")
    watch.add_argument("--interval", type=float, default=1.0, help="Polling interval in seconds")

    chat = sub.add_parser("chat", help="Ask the help chatbot")
    chat.add_argument("message", nargs="?", help="Single message; omit for an interactive prompt")

    help_ = sub.add_parser("help", help="Ask the help desk")
    help_.add_argument("question", help="Question about the submission form")
    help_.add_argument(
        "--seed",
        action="store_true",
        help="Fill an empty knowledge base from the chatbot catalog first",
    )
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=args.log_level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    try:
        if args.command == "check":
            return check_command(args.snapshot, step=args.step)
        if args.command == "watch":
            return watch_command(args.snapshot, interval=max(0.1, args.interval))
        if args.command == "chat":
            return chat_command(args.message)
        return help_command(args.question, seed=args.seed)
    except (OSError, ValueError) as exc:
        sys.stderr.write(f"{exc}\n")
        return 1


if __name__ == "__main__":
    sys.exit(main())
