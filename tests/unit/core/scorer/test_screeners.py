#!/usr/bin/env python3
"""
Tests for screener prompt matching and skill inference.
"""

import unittest

from core.scorer.models import ScreenerAnswer
from core.scorer.screeners import (
    tokenize,
    answer_matches_prompt,
    count_passed,
    extract_skills_from_answers,
    parse_screener_answers,
)


def _answers(*pairs):
    return [ScreenerAnswer(question=q, answer=a) for q, a in pairs]


class TestTokenize(unittest.TestCase):

    def test_lowercases_and_drops_short_tokens(self):
        self.assertEqual(tokenize("Do you know SQL & Go?"), ["you", "know", "sql"])

    def test_empty(self):
        self.assertEqual(tokenize(""), [])
        self.assertEqual(tokenize(None), [])


class TestAnswerMatchesPrompt(unittest.TestCase):

    def test_exact_yes_passes_any_prompt(self):
        self.assertTrue(answer_matches_prompt("Are you authorized to work in Japan?", _answers(("q", "Yes"))))

    def test_yes_followed_by_space_passes(self):
        self.assertTrue(answer_matches_prompt("Are you authorized to work in Japan?", _answers(("q", "yes I am"))))

    def test_yes_with_punctuation_needs_token(self):
        self.assertFalse(answer_matches_prompt("Are you authorized to work in Japan?", _answers(("q", "Yessir"))))

    def test_token_containment_passes(self):
        prompt = "Describe your Kubernetes production experience"
        self.assertTrue(answer_matches_prompt(prompt, _answers(("q", "Ran kubernetes clusters for 3 years"))))

    def test_no_overlap_fails(self):
        prompt = "Describe your Kubernetes production experience"
        self.assertFalse(answer_matches_prompt(prompt, _answers(("q", "No"))))

    def test_only_first_eight_tokens_count(self):
        prompt = "one1 two2 three3 four4 five5 six6 seven7 eight8 ninth"
        self.assertFalse(answer_matches_prompt(prompt, _answers(("q", "ninth"))))
        self.assertTrue(answer_matches_prompt(prompt, _answers(("q", "eight8"))))

    def test_prompt_without_tokens_never_passes(self):
        self.assertFalse(answer_matches_prompt("Go? C#?", _answers(("q", "yes"))))

    def test_no_answers(self):
        self.assertFalse(answer_matches_prompt("Python experience?", []))

    def test_count_passed(self):
        prompts = ["Python experience?", "Remote availability?", "Rust experience?"]
        answers = _answers(("Python?", "python for six years"), ("Remote?", "fully remote"))
        self.assertEqual(count_passed(prompts, answers), 2)


class TestSkillInference(unittest.TestCase):

    def test_extracts_tokens_of_four_or_more_chars_unique(self):
        answers = _answers(("Stack?", "Python, SQL and python again"), ("Infra", "AWS terraform"))
        self.assertEqual(
            extract_skills_from_answers(answers),
            ["stack", "python", "again", "infra", "terraform"]
        )


class TestParseScreenerAnswers(unittest.TestCase):

    def test_keeps_valid_entries_stripped(self):
        raw = [
            {"question": " Python? ", "answer": " yes "},
            {"question": "", "answer": "x"},
            {"question": "q", "answer": 5},
            "not a mapping",
            {"question": "Remote?", "answer": "sometimes"},
        ]
        parsed = parse_screener_answers(raw)
        self.assertEqual(parsed, [
            ScreenerAnswer(question="Python?", answer="yes"),
            ScreenerAnswer(question="Remote?", answer="sometimes"),
        ])

    def test_non_list_input(self):
        self.assertEqual(parse_screener_answers(None), [])
        self.assertEqual(parse_screener_answers({"question": "q", "answer": "a"}), [])


if __name__ == '__main__':
    unittest.main()
