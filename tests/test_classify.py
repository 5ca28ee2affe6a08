"""Tests for task-type classification, title extraction and topic labels."""

import re

import pytest

from daytrace.classify import (
    TOPIC_VOCABULARY,
    classify_task_type,
    extract_task_title,
    extract_topic_cluster,
)
from daytrace.models import TaskType


class TestClassifyTaskType:
    @pytest.mark.parametrize(
        ("prompt", "expected"),
        [
            ("Fix the login redirect bug", TaskType.DEBUGGING),
            ("Why does this test fail on CI?", TaskType.DEBUGGING),
            ("Review my migration script", TaskType.REVIEW),
            ("Is this correct for a singleton?", TaskType.REVIEW),
            ("Explain how the GIL works", TaskType.LEARNING),
            ("What is a vector clock", TaskType.LEARNING),
            ("Should I split this service in two", TaskType.ARCHITECTURE),
            ("Add pagination to the users endpoint", TaskType.IMPLEMENTATION),
            ("hello there", TaskType.IMPLEMENTATION),
        ],
    )
    def test_rules(self, prompt, expected):
        assert classify_task_type(prompt) == expected

    def test_rule_order_debugging_first(self):
        assert classify_task_type("Explain why this crash happens") == TaskType.DEBUGGING

    def test_only_first_200_chars_considered(self):
        prompt = "x " * 150 + "fix the bug"
        assert classify_task_type(prompt) == TaskType.IMPLEMENTATION


class TestExtractTaskTitle:
    def test_first_sentence(self):
        assert extract_task_title("Add a retry decorator. It should back off.") == (
            "Add a retry decorator"
        )

    def test_strips_lead_in(self):
        assert extract_task_title("please explain how OAuth works") == "Explain how OAuth works"
        assert extract_task_title("Can you add dark mode?") == "Add dark mode"

    def test_first_non_empty_line(self):
        assert extract_task_title("\n\n  Refactor the parser\nmore details") == "Refactor the parser"

    def test_truncates_long_titles(self):
        title = extract_task_title("Implement " + "something " * 30)
        assert title.endswith("...")
        assert len(title) <= 83

    def test_empty_prompt(self):
        assert extract_task_title("") == ""
        assert extract_task_title("   \n ") == ""


class TestExtractTopicCluster:
    def test_first_match_wins(self):
        # "login" (authentication) comes before "test" (testing)
        assert extract_topic_cluster("Write a test for the login flow") == "authentication"

    def test_vocabulary_order_is_preserved(self):
        labels = [label for _, label in TOPIC_VOCABULARY]
        assert labels[0] == "authentication"
        assert labels[-1] == "documentation"
        assert len(labels) == 15

    def test_fallback_keeps_case_and_hyphens(self):
        assert extract_topic_cluster("Zebra-striped Giraffes, wandering!") == (
            "Zebra-striped Giraffes wandering"
        )

    def test_general(self):
        assert extract_topic_cluster("hi") == "general"

    def test_custom_vocabulary(self):
        vocab = [(re.compile(r"\bgiraffe", re.I), "zoology")]
        assert extract_topic_cluster("Giraffe necks", vocab) == "zoology"
