from __future__ import annotations

import pytest

from symptomfinder.rules import (
    DEFAULT_CONDITIONS,
    DEFAULT_RECOMMENDATIONS,
    SYMPTOM_PATTERNS,
    analyze_with_rules,
    match_pattern,
)


@pytest.mark.parametrize(
    "text,name,severity,urgency,confidence",
    [
        ("crushing chest pain", "chest_pain", "high", "emergency", 0.9),
        ("I have a headache", "headache", "medium", "soon", 0.8),
        ("fever and chills", "fever", "medium", "soon", 0.7),
        ("stomach pain after lunch", "abdominal_pain", "medium", "soon", 0.6),
        ("shortness of breath", "breathing", "high", "emergency", 0.9),
        ("knee pain when walking", "joint_pain", "medium", "routine", 0.6),
        ("itchy rash on arm", "rash", "low", "routine", 0.6),
        ("nausea since dinner", "nausea", "medium", "soon", 0.7),
        ("dizziness when standing", "dizziness", "medium", "soon", 0.6),
    ],
)
def test_each_pattern_returns_its_table_values(text, name, severity, urgency, confidence) -> None:
    record = match_pattern(text)
    assert record is not None and record["name"] == name

    analysis = analyze_with_rules(text)
    assert analysis.possible_conditions == record["conditions"]
    assert analysis.doctor_types == record["doctor_types"]
    assert analysis.recommendations == record["recommendations"]
    assert analysis.severity == severity
    assert analysis.urgency == urgency
    assert analysis.confidence == confidence


@pytest.mark.parametrize("record", SYMPTOM_PATTERNS, ids=lambda r: r["name"])
def test_every_trigger_phrase_matches_its_own_record(record) -> None:
    for phrase in record["patterns"]:
        matched = match_pattern(phrase)
        assert matched is not None
        assert matched["name"] == record["name"], phrase


def test_first_matching_pattern_wins() -> None:
    analysis = analyze_with_rules("chest pain and a headache")
    assert analysis.possible_conditions[0] == "Angina"


@pytest.mark.parametrize(
    "text,severity,urgency,red_flags",
    [
        ("severe headache", "high", "urgent", ["Sudden severe headache", "Headache with fever and stiff neck"]),
        ("worst headache ever", "high", "urgent", []),
        ("high fever all night", "high", "urgent", ["Fever above 103°F", "Fever with severe headache or rash"]),
        ("fever of 104", "high", "urgent", []),
        ("spreading rash", "medium", "soon", []),
        ("severe rash", "medium", "soon", ["Rapidly spreading rash", "Rash with difficulty breathing"]),
        ("severe nausea", "high", "urgent", []),
        ("vomiting blood", "high", "urgent", ["Vomiting blood", "Severe dehydration"]),
    ],
)
def test_escalation_terms(text, severity, urgency, red_flags) -> None:
    analysis = analyze_with_rules(text)
    assert analysis.severity == severity
    assert analysis.urgency == urgency
    assert analysis.red_flags == red_flags


def test_non_escalated_patterns_keep_empty_red_flags() -> None:
    assert analyze_with_rules("headache").red_flags == []
    assert analyze_with_rules("mild fever").red_flags == []


def test_pattern_without_own_questions_computes_them() -> None:
    analysis = analyze_with_rules("stomach pain")
    assert analysis.red_flags == []
    assert analysis.follow_up_questions == [
        "How long have you been experiencing these symptoms?",
        "Are the symptoms getting better, worse, or staying the same?",
        "On a scale of 1-10, how would you rate the pain?",
        "What makes the pain better or worse?",
        "Have you taken any medications for these symptoms?",
    ]


def test_unmatched_input_returns_default() -> None:
    analysis = analyze_with_rules("I feel tired")
    assert analysis.severity == "medium"
    assert analysis.urgency == "routine"
    assert analysis.confidence == 0.4
    assert analysis.possible_conditions == DEFAULT_CONDITIONS
    assert analysis.recommendations == DEFAULT_RECOMMENDATIONS
    assert analysis.doctor_types == ["Primary Care Physician (PCP)"]
    assert analysis.symptoms == ["tired"]
    assert analysis.red_flags == []


def test_unmatched_input_uses_keyword_extraction() -> None:
    analysis = analyze_with_rules("coughing blood")
    assert analysis.severity == "medium"
    assert analysis.urgency == "emergency"
    assert analysis.red_flags == ["Any bleeding symptoms should be evaluated immediately"]

    assert analyze_with_rules("mild fatigue").severity == "low"


def test_classifier_is_deterministic() -> None:
    text = "severe headache with nausea"
    assert analyze_with_rules(text) == analyze_with_rules(text)
