"""Help desk answering free-form questions about the submission form.

Answers come from a local SQLite Q&A table first, then an optional
OpenAI-compatible chat endpoint, then a fixed fallback. Lookup failures are
logged and fall through to the next source.
"""

from __future__ import annotations

import json
import logging
import sqlite3
import urllib.request
from contextlib import closing
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterable, List, Optional, Sequence

from .chatbot.knowledge_base import IntentEntry
from .config import HelpDeskConfig

logger = logging.getLogger(__name__)

MIN_QUESTION_CHARS = 3
MAX_QUESTION_CHARS = 500
MIN_SEARCH_WORD_CHARS = 4

SOURCE_KNOWLEDGE_BASE = "knowledge_base"
SOURCE_AI = "ai"
SOURCE_FALLBACK = "fallback"

FALLBACK_ANSWER = (
    "I don't have a specific answer for that question, but the IMDb Help Center (help.imdb.com) "
    "has detailed guides for every part of the submission process. You can also check the info "
    "buttons next to each field for quick tips."
)

HELP_SYSTEM_PROMPT = (
    "You are a helpful assistant for an IMDb-style title submission form. Answer questions about "
    "filling out the form, evidence requirements, release dates, credits, and submission process. "
    "Keep answers practical, concise (2-4 sentences), and focused on helping the user complete "
    "their submission. Do not make up IMDb policies. If unsure, recommend checking the IMDb Help Center."
)


@dataclass(slots=True, frozen=True)
class HelpAnswer:
    answer: str
    source: str


@dataclass(slots=True, frozen=True)
class HelpEntry:
    question: str
    answer: str
    keywords: str = ""


def validate_question(question: Any) -> str:
    text = question.strip() if isinstance(question, str) else ""
    if not MIN_QUESTION_CHARS <= len(text) <= MAX_QUESTION_CHARS:
        raise ValueError(f"Question must be {MIN_QUESTION_CHARS}-{MAX_QUESTION_CHARS} characters")
    return text


def search_words(question: str) -> List[str]:
    return [word for word in question.lower().split() if len(word) >= MIN_SEARCH_WORD_CHARS]


def _like_pattern(word: str) -> str:
    escaped = word.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


class HelpKnowledgeBase:
    """SQLite table of curated question/answer pairs."""

    def __init__(self, db_path: str | Path = ":memory:") -> None:
        self.db_path = str(db_path)
        self.conn = sqlite3.connect(self.db_path)
        self.conn.row_factory = sqlite3.Row
        self._ensure_schema()

    def _ensure_schema(self) -> None:
        with closing(self.conn.cursor()) as cur:
            cur.execute(
                """
                CREATE TABLE IF NOT EXISTS help_qa (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    question TEXT NOT NULL,
                    answer TEXT NOT NULL,
                    keywords TEXT NOT NULL DEFAULT ''
                )
                """
            )
            self.conn.commit()

    def add(self, entry: HelpEntry) -> None:
        with closing(self.conn.cursor()) as cur:
            cur.execute(
                "INSERT INTO help_qa (question, answer, keywords) VALUES (?, ?, ?)",
                (entry.question, entry.answer, entry.keywords),
            )
            self.conn.commit()

    def bulk_add(self, entries: Iterable[HelpEntry]) -> None:
        for entry in entries:
            self.add(entry)

    def count(self) -> int:
        with closing(self.conn.cursor()) as cur:
            cur.execute("SELECT COUNT(*) FROM help_qa")
            return int(cur.fetchone()[0])

    def search(self, words: Sequence[str]) -> Optional[HelpEntry]:
        """Return the first entry whose question or keywords contain any of ``words``."""

        if not words:
            return None
        clauses = " OR ".join("question LIKE ? ESCAPE '\\' OR keywords LIKE ? ESCAPE '\\'" for _ in words)
        params: List[str] = []
        for word in words:
            pattern = _like_pattern(word)
            params.extend((pattern, pattern))
        with closing(self.conn.cursor()) as cur:
            cur.execute(f"SELECT question, answer, keywords FROM help_qa WHERE {clauses} ORDER BY id LIMIT 1", params)
            row = cur.fetchone()
        if row is None:
            return None
        return HelpEntry(question=row["question"], answer=row["answer"], keywords=row["keywords"])

    def close(self) -> None:
        self.conn.close()


def entries_from_intents(intents: Iterable[IntentEntry]) -> List[HelpEntry]:
    """Turn chatbot catalog entries into Q&A rows (first variant as the answer)."""

    entries: List[HelpEntry] = []
    for intent in intents:
        if not intent.variants or not intent.keywords:
            continue
        entries.append(
            HelpEntry(
                question="; ".join(intent.triggers),
                answer=intent.variants[0],
                keywords=" ".join(intent.keywords),
            )
        )
    return entries


class HelpDesk:
    def __init__(self, knowledge_base: HelpKnowledgeBase | None = None, config: HelpDeskConfig | None = None) -> None:
        self.config = config or HelpDeskConfig()
        self.knowledge_base = knowledge_base or HelpKnowledgeBase(self.config.db_path)

    def answer(self, question: str) -> HelpAnswer:
        """Answer ``question``; raises ``ValueError`` only for out-of-range input."""

        text = validate_question(question)

        try:
            entry = self.knowledge_base.search(search_words(text))
        except sqlite3.Error:
            logger.warning("Help knowledge base search failed", exc_info=True)
            entry = None
        if entry is not None:
            return HelpAnswer(answer=entry.answer, source=SOURCE_KNOWLEDGE_BASE)

        if self.config.ai_enabled:
            reply = self._ask_ai(text)
            if reply:
                return HelpAnswer(answer=reply, source=SOURCE_AI)

        logger.info("No help answer found, using fallback")
        return HelpAnswer(answer=FALLBACK_ANSWER, source=SOURCE_FALLBACK)

    def _ask_ai(self, question: str) -> str:
        body = json.dumps(
            {
                "model": self.config.ai_model,
                "messages": [
                    {"role": "system", "content": HELP_SYSTEM_PROMPT},
                    {"role": "user", "content": question},
                ],
                "temperature": 0.3,
                "max_tokens": 300,
            }
        ).encode("utf-8")
        request = urllib.request.Request(
            self.config.ai_url,
            data=body,
            method="POST",
            headers={
                "Authorization": f"Bearer {self.config.ai_api_key}",
                "Content-Type": "application/json",
                "HTTP-Referer": self.config.app_url or "http://localhost:3000",
                "X-Title": "Title Guide Help",
            },
        )
        try:
            with urllib.request.urlopen(request, timeout=self.config.ai_timeout) as response:
                status = getattr(response, "status", 200)
                if status != 200:
                    logger.warning("Help AI endpoint returned status %s", status)
                    return ""
                payload = json.loads(response.read().decode("utf-8"))
        except (OSError, ValueError):
            logger.warning("Help AI request failed", exc_info=True)
            return ""
        return _reply_text(payload)

    def close(self) -> None:
        self.knowledge_base.close()


def _reply_text(payload: Any) -> str:
    try:
        content = payload["choices"][0]["message"]["content"]
    except (KeyError, IndexError, TypeError):
        return ""
    return content.strip() if isinstance(content, str) else ""
