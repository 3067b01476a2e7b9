from typing import Dict, Optional

from loguru import logger

from symptomfinder.keywords import (
    extract_severity,
    extract_urgency,
    generate_follow_up_questions,
    generate_red_flags,
    parse_symptoms,
)
from symptomfinder.schemas import SymptomAnalysis

PCP = "Primary Care Physician (PCP)"

# Used when a pattern record does not carry its own confidence
DEFAULT_PATTERN_CONFIDENCE = 0.6

# Ordered: the first record with a matching trigger wins.
SYMPTOM_PATTERNS = [
    {
        "name": "chest_pain",
        "patterns": ["chest pain", "chest tightness", "heart pain", "angina", "crushing chest pain"],
        "conditions": ["Angina", "Heart attack", "Costochondritis", "Anxiety", "Pulmonary embolism"],
        "severity": "high",
        "urgency": "emergency",
        "doctor_types": ["Emergency Medicine", "Cardiology"],
        "recommendations": [
            "Call 911 immediately",
            "Chew aspirin if not allergic",
            "Do not drive yourself to hospital",
            "Stay calm and rest until help arrives",
        ],
        "red_flags": ["Chest pain with shortness of breath", "Pain radiating to arm or jaw"],
        "follow_up_questions": ["Is the pain crushing or squeezing?", "Does it radiate to your arm or jaw?"],
        "confidence": 0.9,
    },
    {
        "name": "headache",
        "patterns": ["headache", "migraine", "head pain", "severe headache", "worst headache"],
        "conditions": ["Tension headache", "Migraine", "Cluster headache", "Sinus headache", "Meningitis"],
        "severity": "medium",
        "urgency": "soon",
        "doctor_types": [PCP, "Neurology", "Emergency Medicine"],
        "recommendations": [
            "Rest in a quiet, dark room",
            "Stay hydrated",
            "Apply cold or warm compress",
            "Avoid triggers like bright lights",
            "See doctor if sudden, severe, or with fever",
        ],
        "red_flags": [],
        "follow_up_questions": [
            "How long have you had this headache?",
            "Is this the worst headache of your life?",
            "Any fever or neck stiffness?",
        ],
        "confidence": 0.8,
    },
    {
        "name": "fever",
        "patterns": ["fever", "high temperature", "hot", "chills", "sweating"],
        "conditions": ["Viral infection", "Bacterial infection", "Flu", "COVID-19", "Sepsis"],
        "severity": "medium",
        "urgency": "soon",
        "doctor_types": [PCP, "Emergency Medicine"],
        "recommendations": [
            "Rest and stay hydrated",
            "Monitor temperature regularly",
            "Take fever-reducing medication as directed",
            "Isolate if infectious disease suspected",
            "Seek immediate care if fever >103°F (39.4°C)",
        ],
        "red_flags": [],
        "follow_up_questions": [
            "What is your exact temperature?",
            "How long have you had the fever?",
            "Any other symptoms like rash or difficulty breathing?",
        ],
        "confidence": 0.7,
    },
    {
        "name": "abdominal_pain",
        "patterns": ["abdominal pain", "stomach pain", "belly pain", "cramps"],
        "conditions": ["Gastritis", "Food poisoning", "Appendicitis", "Irritable bowel syndrome"],
        "severity": "medium",
        "urgency": "soon",
        "doctor_types": [PCP, "Gastroenterology", "Emergency Medicine"],
        "recommendations": [
            "Avoid solid foods initially",
            "Stay hydrated with clear liquids",
            "Seek immediate care if pain is severe or localized",
        ],
    },
    {
        "name": "breathing",
        "patterns": ["shortness of breath", "difficulty breathing", "breathing problems", "can't breathe", "gasping"],
        "conditions": ["Asthma", "Anxiety", "Pneumonia", "Heart problems", "Pulmonary embolism", "COPD"],
        "severity": "high",
        "urgency": "emergency",
        "doctor_types": ["Emergency Medicine", "Cardiology", "Pulmonology"],
        "recommendations": [
            "Call 911 immediately if severe",
            "Sit upright and try to stay calm",
            "Use rescue inhaler if prescribed",
            "Loosen tight clothing",
            "Do not lie flat",
        ],
        "red_flags": ["Severe difficulty breathing", "Blue lips or fingernails", "Cannot speak in full sentences"],
        "follow_up_questions": [
            "Can you speak in full sentences?",
            "Do you have a rescue inhaler?",
            "Any chest pain with the breathing difficulty?",
        ],
        "confidence": 0.9,
    },
    {
        "name": "joint_pain",
        "patterns": ["joint pain", "arthritis", "knee pain", "hip pain"],
        "conditions": ["Osteoarthritis", "Rheumatoid arthritis", "Bursitis", "Tendonitis"],
        "severity": "medium",
        "urgency": "routine",
        "doctor_types": [PCP, "Orthopedics", "Rheumatology"],
        "recommendations": [
            "Rest the affected joint",
            "Apply ice or heat as appropriate",
            "Consider over-the-counter pain relievers",
            "Schedule appointment with specialist",
        ],
    },
    {
        "name": "rash",
        "patterns": ["rash", "skin rash", "hives", "itching", "red spots"],
        "conditions": ["Allergic reaction", "Eczema", "Psoriasis", "Contact dermatitis", "Viral rash"],
        "severity": "low",
        "urgency": "routine",
        "doctor_types": [PCP, "Dermatology"],
        "recommendations": [
            "Avoid scratching",
            "Use gentle, fragrance-free products",
            "Apply cool compresses",
            "Take antihistamines if allergic reaction",
            "See doctor if rash is severe or spreading",
        ],
        "red_flags": [],
        "follow_up_questions": [
            "Is the rash spreading?",
            "Any new medications or foods recently?",
            "Any difficulty breathing or swelling?",
        ],
        "confidence": 0.6,
    },
    {
        "name": "nausea",
        "patterns": ["nausea", "vomiting", "throwing up", "sick to stomach"],
        "conditions": ["Gastroenteritis", "Food poisoning", "Migraine", "Pregnancy", "Medication side effect"],
        "severity": "medium",
        "urgency": "soon",
        "doctor_types": [PCP, "Gastroenterology", "Emergency Medicine"],
        "recommendations": [
            "Stay hydrated with small sips of clear fluids",
            "Rest and avoid solid foods initially",
            "Try ginger or peppermint for nausea",
            "Seek care if unable to keep fluids down",
        ],
        "red_flags": [],
        "follow_up_questions": ["Any blood in vomit?", "Can you keep fluids down?", "Any severe abdominal pain?"],
        "confidence": 0.7,
    },
    {
        "name": "dizziness",
        "patterns": ["dizziness", "lightheaded", "vertigo", "spinning"],
        "conditions": ["Inner ear problem", "Low blood pressure", "Dehydration", "Medication side effect", "Vertigo"],
        "severity": "medium",
        "urgency": "soon",
        "doctor_types": [PCP, "ENT (Ear, Nose, Throat)", "Neurology"],
        "recommendations": [
            "Sit or lie down immediately",
            "Stay hydrated",
            "Avoid sudden movements",
            "Check blood pressure if possible",
        ],
        "red_flags": ["Dizziness with chest pain", "Sudden severe dizziness with headache"],
        "follow_up_questions": ["Any hearing changes?", "Recent medication changes?", "Any chest pain or palpitations?"],
        "confidence": 0.6,
    },
]

DEFAULT_CONDITIONS = [
    "General symptoms requiring evaluation",
    "Possible viral infection",
    "Stress-related symptoms",
]

DEFAULT_RECOMMENDATIONS = [
    "Monitor symptoms for 24-48 hours",
    "Rest and stay hydrated",
    "Consider over-the-counter remedies if appropriate",
    "See primary care physician if symptoms persist or worsen",
]

DEFAULT_CONFIDENCE = 0.4


def _escalations(name: str, lower: str) -> Dict:
    """Field overrides for patterns whose severity depends on qualifier words."""
    if name == "headache" and ("severe" in lower or "worst" in lower):
        overrides = {"severity": "high", "urgency": "urgent"}
        if "severe" in lower:
            overrides["red_flags"] = ["Sudden severe headache", "Headache with fever and stiff neck"]
        return overrides
    if name == "fever" and ("high fever" in lower or "104" in lower):
        overrides = {"severity": "high", "urgency": "urgent"}
        if "high fever" in lower:
            overrides["red_flags"] = ["Fever above 103°F", "Fever with severe headache or rash"]
        return overrides
    if name == "rash" and ("severe" in lower or "spreading" in lower):
        overrides = {"severity": "medium", "urgency": "soon"}
        if "severe" in lower:
            overrides["red_flags"] = ["Rapidly spreading rash", "Rash with difficulty breathing"]
        return overrides
    if name == "nausea" and ("severe" in lower or "blood" in lower):
        overrides = {"severity": "high", "urgency": "urgent"}
        if "blood" in lower:
            overrides["red_flags"] = ["Vomiting blood", "Severe dehydration"]
        return overrides
    return {}


def match_pattern(symptoms: str) -> Optional[Dict]:
    """Return the first pattern record triggered by the text, with escalations applied."""
    lower = symptoms.lower()
    for record in SYMPTOM_PATTERNS:
        if any(p in lower for p in record["patterns"]):
            return {**record, **_escalations(record["name"], lower)}
    return None


def analyze_with_rules(symptoms: str) -> SymptomAnalysis:
    """Keyword-table classification; pure and deterministic."""
    record = match_pattern(symptoms)

    if record is None:
        severity = extract_severity(symptoms)
        urgency = extract_urgency(symptoms)
        logger.info("No symptom pattern matched, using keyword defaults ({}/{})", severity, urgency)
        return SymptomAnalysis(
            symptoms=parse_symptoms(symptoms),
            possible_conditions=list(DEFAULT_CONDITIONS),
            severity=severity,
            urgency=urgency,
            recommendations=list(DEFAULT_RECOMMENDATIONS),
            doctor_types=[PCP],
            confidence=DEFAULT_CONFIDENCE,
            red_flags=generate_red_flags(symptoms, severity, urgency),
            follow_up_questions=generate_follow_up_questions(symptoms),
        )

    logger.info("Matched symptom pattern '{}'", record["name"])
    red_flags = record.get("red_flags")
    if red_flags is None:
        red_flags = generate_red_flags(symptoms, record["severity"], record["urgency"])
    follow_ups = record.get("follow_up_questions")
    if follow_ups is None:
        follow_ups = generate_follow_up_questions(symptoms)

    return SymptomAnalysis(
        symptoms=parse_symptoms(symptoms),
        possible_conditions=list(record["conditions"]),
        severity=record["severity"],
        urgency=record["urgency"],
        recommendations=list(record["recommendations"]),
        doctor_types=list(record["doctor_types"]),
        confidence=record.get("confidence", DEFAULT_PATTERN_CONFIDENCE),
        red_flags=list(red_flags),
        follow_up_questions=list(follow_ups),
    )
