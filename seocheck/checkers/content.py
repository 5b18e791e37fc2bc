from __future__ import annotations

import re

from ..models import CheckResult
from .base import BaseChecker

_SENTENCE_RE = re.compile(r"[.!?]+")
_VOWEL_GROUP_RE = re.compile(r"[aeiouy]+")


def count_syllables(word: str) -> int:
    w = word.lower()
    if len(w) <= 3:
        return 1
    w = re.sub(r"(?:[^laeiouy]es|ed|[^laeiouy]e)$", "", w)
    w = re.sub(r"^y", "", w)
    return max(1, len(_VOWEL_GROUP_RE.findall(w)))


def flesch_reading_ease(text: str) -> float:
    words = re.findall(r"[A-Za-z]+", text)
    sentences = [s for s in _SENTENCE_RE.split(text) if s.strip()]
    if not words or not sentences:
        return 0.0
    syllables = sum(count_syllables(w) for w in words)
    return 206.835 - 1.015 * (len(words) / len(sentences)) - 84.6 * (syllables / len(words))


def readability_level(score: float) -> str:
    if score >= 80:
        return "Very Easy"
    if score >= 70:
        return "Easy"
    if score >= 60:
        return "Standard"
    if score >= 50:
        return "Fairly Difficult"
    if score >= 30:
        return "Difficult"
    return "Very Difficult"


class ContentChecker(BaseChecker):
    category = "content"
    RULES = {
        "word-count-sufficient": "check_word_count",
        "readability": "check_readability",
        "text-to-html-ratio": "check_text_ratio",
        "not-soft-404": "check_soft_404",
    }

    def check_word_count(self) -> CheckResult:
        rule = "word-count-sufficient"
        min_words = int(self.option(rule, "minWords", 300))
        n = int(self.body.get("word_count") or 0)
        if n < min_words:
            return self.result(rule, False, f"Content is too short ({n} words). Recommended: at least {min_words} words", wordCount=n)
        if n < 1000:
            return self.result(rule, True, f"Good content length ({n} words)", wordCount=n)
        return self.result(rule, True, f"Excellent content length ({n} words)", wordCount=n)

    def check_readability(self) -> CheckResult:
        text = self.body.get("text") or ""
        if int(self.body.get("word_count") or 0) < 100:
            return self.result("readability", False, "Not enough content to calculate readability")
        score = flesch_reading_ease(text)
        level = readability_level(score)
        return self.result(
            "readability", score >= 30,
            f"Readability: {level} (Flesch Score: {round(score)})",
            fleschScore=round(score, 1), level=level,
        )

    def check_text_ratio(self) -> CheckResult:
        rule = "text-to-html-ratio"
        html_size = self.snapshot.html_size
        if not html_size:
            return self.result(rule, False, "Page HTML is empty")
        text_size = len((self.body.get("text") or "").encode("utf-8", errors="ignore"))
        ratio = round(100.0 * text_size / html_size, 1)
        if ratio < float(self.option(rule, "minPercent", 10)):
            return self.result(rule, False, f"Low text-to-HTML ratio ({ratio}%). Page may have too much code", ratio=ratio)
        if ratio >= 25:
            return self.result(rule, True, f"Excellent text-to-HTML ratio ({ratio}%)", ratio=ratio)
        return self.result(rule, True, f"Acceptable text-to-HTML ratio ({ratio}%)", ratio=ratio)

    def check_soft_404(self) -> CheckResult:
        if self.body.get("soft404_signal") and int(self.body.get("word_count") or 0) < 150:
            return self.result("not-soft-404", False, "Page looks like an error page served with a success status")
        return self.result("not-soft-404", True, "No soft 404 signals")
