#!/usr/bin/env python3
"""
Screener Matching - Decide which screener prompts a set of answers satisfies,
and infer skills from what the candidate wrote.
"""

import re
from typing import Any, Iterable, List

from core.utils import parse_unique_list, normalize_token
from core.scorer.models import ScreenerAnswer

_NON_ALNUM = re.compile(r"[^a-z0-9]+")

PROMPT_TOKEN_LIMIT = 8
MIN_TOKEN_LENGTH = 3
MIN_SKILL_TOKEN_LENGTH = 4


def tokenize(value: str) -> List[str]:
    """Lowercase alphanumeric tokens of at least three characters."""
    return [
        token for token in _NON_ALNUM.split((value or "").lower())
        if len(token) >= MIN_TOKEN_LENGTH
    ]


def _is_affirmative(answer: str) -> bool:
    return answer == "yes" or answer.startswith("yes ")


def answer_matches_prompt(prompt: str, answers: Iterable[ScreenerAnswer]) -> bool:
    """
    A prompt passes when any answer is an affirmative "yes ..." or mentions one
    of the prompt's first eight tokens. Prompts without usable tokens never pass.
    """
    tokens = tokenize(prompt)[:PROMPT_TOKEN_LIMIT]
    if not tokens:
        return False

    for entry in answers:
        answer = normalize_token(entry.answer)
        if not answer:
            continue
        if _is_affirmative(answer):
            return True
        if any(token in answer for token in tokens):
            return True
    return False


def count_passed(prompts: List[str], answers: List[ScreenerAnswer]) -> int:
    return sum(1 for prompt in prompts if answer_matches_prompt(prompt, answers))


def extract_skills_from_answers(answers: Iterable[ScreenerAnswer]) -> List[str]:
    seeds = [
        token
        for entry in answers
        for token in tokenize(f"{entry.question} {entry.answer}")
        if len(token) >= MIN_SKILL_TOKEN_LENGTH
    ]
    return parse_unique_list(seeds)


def parse_screener_answers(value: Any) -> List[ScreenerAnswer]:
    """Keep only mappings with non-empty string question and answer, stripped."""
    if not isinstance(value, (list, tuple)):
        return []

    answers = []
    for entry in value:
        if not isinstance(entry, dict):
            continue
        question = entry.get('question')
        answer = entry.get('answer')
        question = question.strip() if isinstance(question, str) else ""
        answer = answer.strip() if isinstance(answer, str) else ""
        if question and answer:
            answers.append(ScreenerAnswer(question=question, answer=answer))
    return answers
