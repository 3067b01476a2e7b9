from __future__ import annotations

import pytest

from symptomfinder.keywords import (
    detect_emergency,
    extract_severity,
    extract_urgency,
    generate_follow_up_questions,
    generate_red_flags,
    parse_symptoms,
)


@pytest.mark.parametrize(
    "text,expected",
    [
        ("Excruciating back ache", "high"),
        ("sharp twinge", "high"),
        ("constant ringing in ears", "medium"),
        ("mild fatigue", "low"),
        ("occasional sneezing", "low"),
        ("tired", "medium"),
    ],
)
def test_extract_severity(text: str, expected: str) -> None:
    assert extract_severity(text) == expected


@pytest.mark.parametrize(
    "text,expected",
    [
        ("coughing blood since morning", "emergency"),
        ("sudden weakness on one side", "emergency"),
        ("I can't sleep", "urgent"),
        ("it keeps getting worse", "urgent"),
        ("recurring back ache", "soon"),
        ("tired", "routine"),
    ],
)
def test_extract_urgency(text: str, expected: str) -> None:
    assert extract_urgency(text) == expected


def test_parse_symptoms_splits_and_strips_lead_in() -> None:
    assert parse_symptoms("I have a headache, fever and chills") == ["a headache", "fever", "chills"]
    assert parse_symptoms("cough with phlegm; sore throat") == ["cough", "phlegm", "sore throat"]
    assert parse_symptoms("Feeling dizzy") == ["dizzy"]


def test_parse_symptoms_drops_empty_fragments() -> None:
    assert parse_symptoms(" , ;cough,, ") == ["cough"]


def test_red_flags_only_for_high_severity_or_emergency() -> None:
    assert generate_red_flags("blood in stool", "medium", "soon") == []
    flags = generate_red_flags("blood in stool", "high", "soon")
    assert flags == ["Any bleeding symptoms should be evaluated immediately"]


def test_red_flags_cover_each_trigger() -> None:
    flags = generate_red_flags("chest pain, can't breathe, worst headache, coughing blood", "high", "emergency")
    assert len(flags) == 4


def test_follow_up_questions_are_capped_at_five() -> None:
    questions = generate_follow_up_questions("pain, fever and headache")
    assert len(questions) == 5
    assert questions[2] == "On a scale of 1-10, how would you rate the pain?"
    assert questions[4] == "What is your exact temperature?"


def test_follow_up_questions_default() -> None:
    questions = generate_follow_up_questions("tired")
    assert questions == [
        "How long have you been experiencing these symptoms?",
        "Are the symptoms getting better, worse, or staying the same?",
        "Have you taken any medications for these symptoms?",
        "Do you have any relevant medical history or allergies?",
    ]


def test_detect_emergency() -> None:
    assert detect_emergency("Crushing CHEST PAIN") == "chest pain"
    assert detect_emergency("runny nose") is None


def test_parse_symptoms_drops_fragments_that_are_only_a_lead_in() -> None:
    assert parse_symptoms("I have") == []
    assert parse_symptoms("I feel, cough and feeling") == ["cough"]
