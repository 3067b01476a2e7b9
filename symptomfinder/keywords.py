import re
from typing import List, Optional

from symptomfinder.schemas import Severity, Urgency

EMERGENCY_KEYWORDS = [
    "chest pain", "difficulty breathing", "severe bleeding", "unconscious",
    "stroke", "heart attack", "can't breathe", "crushing pain",
    "severe headache", "worst headache", "sudden weakness", "paralysis",
    "severe abdominal pain", "vomiting blood", "coughing blood",
]

# Shorter list used to raise the "call emergency services" alert in the UI
ALERT_KEYWORDS = [
    "chest pain", "difficulty breathing", "severe bleeding",
    "unconscious", "stroke", "heart attack",
]

HIGH_SEVERITY_TERMS = ["severe", "excruciating", "unbearable", "worst", "crushing", "sharp"]
MEDIUM_SEVERITY_TERMS = ["moderate", "persistent", "chronic", "constant", "throbbing"]
LOW_SEVERITY_TERMS = ["mild", "slight", "minor", "occasional"]

URGENT_TERMS = ["severe", "sudden", "worsening", "getting worse", "can't"]
SOON_TERMS = ["persistent", "chronic", "ongoing", "recurring"]

_SPLIT_RE = re.compile(r"[,;]|\sand\s|\swith\s")
_LEAD_IN_RE = re.compile(r"^(i have|i feel|experiencing|feeling)\s*", re.IGNORECASE)


def _contains_any(text: str, terms: List[str]) -> bool:
    return any(term in text for term in terms)


def extract_severity(symptoms: str) -> Severity:
    """Estimate severity from intensity words, defaulting to medium."""
    lower = symptoms.lower()
    if _contains_any(lower, HIGH_SEVERITY_TERMS):
        return "high"
    if _contains_any(lower, MEDIUM_SEVERITY_TERMS):
        return "medium"
    if _contains_any(lower, LOW_SEVERITY_TERMS):
        return "low"
    return "medium"


def extract_urgency(symptoms: str) -> Urgency:
    """Estimate urgency from emergency and onset/duration words, defaulting to routine."""
    lower = symptoms.lower()
    if _contains_any(lower, EMERGENCY_KEYWORDS):
        return "emergency"
    if _contains_any(lower, URGENT_TERMS):
        return "urgent"
    if _contains_any(lower, SOON_TERMS):
        return "soon"
    return "routine"


def parse_symptoms(symptoms: str) -> List[str]:
    """Split a free-text description into individual symptom phrases."""
    parts = [p.strip() for p in _SPLIT_RE.split(symptoms)]
    stripped = [_LEAD_IN_RE.sub("", p) for p in parts if p]
    return [s for s in stripped if s]


def generate_red_flags(symptoms: str, severity: str, urgency: str) -> List[str]:
    lower = symptoms.lower()
    red_flags: List[str] = []

    if urgency != "emergency" and severity != "high":
        return red_flags

    if "chest pain" in lower:
        red_flags.append("Chest pain may indicate heart attack or other serious condition")
    if "difficulty breathing" in lower or "can't breathe" in lower:
        red_flags.append("Breathing difficulties require immediate medical attention")
    if "severe headache" in lower or "worst headache" in lower:
        red_flags.append("Sudden severe headache may indicate stroke or other emergency")
    if "blood" in lower:
        red_flags.append("Any bleeding symptoms should be evaluated immediately")

    return red_flags


def generate_follow_up_questions(symptoms: str) -> List[str]:
    """Generic intake questions plus a few keyed on pain, fever and headache (max 5)."""
    lower = symptoms.lower()
    questions = [
        "How long have you been experiencing these symptoms?",
        "Are the symptoms getting better, worse, or staying the same?",
    ]

    if "pain" in lower:
        questions.append("On a scale of 1-10, how would you rate the pain?")
        questions.append("What makes the pain better or worse?")

    if "fever" in lower:
        questions.append("What is your exact temperature?")
        questions.append("Have you taken any fever-reducing medication?")

    if "headache" in lower:
        questions.append("Is this the worst headache you've ever had?")
        questions.append("Any nausea, vomiting, or vision changes with the headache?")

    questions.append("Have you taken any medications for these symptoms?")
    questions.append("Do you have any relevant medical history or allergies?")

    return questions[:5]


def detect_emergency(symptoms: str) -> Optional[str]:
    lower = symptoms.lower()
    for kw in ALERT_KEYWORDS:
        if kw in lower:
            return kw
    return None
