import json
import re
from typing import Dict, Optional, Tuple

from loguru import logger
from pydantic import ValidationError

from symptomfinder.config import Settings
from symptomfinder.rules import analyze_with_rules
from symptomfinder.schemas import SymptomAnalysis


class LLMResponseError(Exception):
    """The model answered, but not with a usable analysis."""


REQUIRED_FIELDS = ("symptoms", "possibleConditions", "severity")

PROMPT_TEMPLATE = """Analyze symptoms: "{symptoms}"

Respond with valid JSON only:
{{
"symptoms": ["symptom1", "symptom2"],
"possibleConditions": ["condition1", "condition2"],
"severity": "low",
"urgency": "routine",
"recommendations": ["rest", "see doctor"],
"doctorTypes": ["Primary Care Physician"],
"confidence": 0.7,
"redFlags": [],
"followUpQuestions": ["How long?", "Getting worse?"],
"dietSuggestions": {{"foods": [], "avoid": [], "supplements": [], "hydration": []}}
}}

severity must be one of: low, medium, high.
urgency must be one of: routine, soon, urgent, emergency."""

_FENCE_RE = re.compile(r"```(?:json)?\s*")
_TRAILING_COMMA_OBJ_RE = re.compile(r",\s*}")
_TRAILING_COMMA_ARR_RE = re.compile(r",\s*]")
_BARE_KEY_RE = re.compile(r"([{,]\s*)(\w+):")


def build_prompt(symptoms: str) -> str:
    return PROMPT_TEMPLATE.format(symptoms=symptoms)


# ---- Ollama through its OpenAI-compatible API (lazy import, as for Whisper) ----
def call_llm(symptoms: str, settings: Settings) -> str:
    from openai import OpenAI

    client = OpenAI(
        base_url=f"{settings.ollama_url}/v1",
        api_key="ollama",  # required by the SDK, ignored by Ollama
        timeout=settings.ollama_timeout,
        max_retries=0,
    )
    logger.info("Sending request to Ollama at {} with model {}", settings.ollama_url, settings.ollama_model)
    resp = client.chat.completions.create(
        model=settings.ollama_model,
        messages=[{"role": "user", "content": build_prompt(symptoms)}],
        temperature=0.3,
        top_p=0.9,
    )
    content = resp.choices[0].message.content or ""
    logger.debug("Raw Ollama response: {}", content)
    return content


def repair_json(raw: str) -> Dict:
    """
    Coerce a loosely formatted model reply into a dict.

    Strips markdown fences, keeps the outermost {...} span, and if that does not
    parse, drops trailing commas and quotes bare keys before trying again.
    """
    text = (raw or "").strip()
    if "```" in text:
        text = _FENCE_RE.sub("", text)

    first = text.find("{")
    last = text.rfind("}")
    if first != -1 and last != -1:
        text = text[first:last + 1]

    try:
        parsed = json.loads(text)
    except json.JSONDecodeError:
        cleaned = _TRAILING_COMMA_OBJ_RE.sub("}", text)
        cleaned = _TRAILING_COMMA_ARR_RE.sub("]", cleaned)
        cleaned = _BARE_KEY_RE.sub(r'\1"\2":', cleaned)
        try:
            parsed = json.loads(cleaned)
        except json.JSONDecodeError as e:
            raise LLMResponseError(f"Invalid JSON response from model: {e}") from e

    if not isinstance(parsed, dict):
        raise LLMResponseError("Model response is not a JSON object")

    # stricter than a plain presence check: an empty list or string counts as missing
    missing = [f for f in REQUIRED_FIELDS if not parsed.get(f)]
    if missing:
        raise LLMResponseError(f"Missing required fields in JSON response: {', '.join(missing)}")
    return parsed


def coerce_analysis(data: Dict) -> SymptomAnalysis:
    # urgency is not a required field in model replies
    data = {"urgency": "routine", **data}
    try:
        return SymptomAnalysis.model_validate(data)
    except ValidationError as e:
        raise LLMResponseError(f"Model response failed validation: {e.error_count()} error(s)") from e


def analyze_with_llm(symptoms: str, settings: Settings) -> SymptomAnalysis:
    raw = call_llm(symptoms, settings)
    return coerce_analysis(repair_json(raw))


def analyze_symptoms(symptoms: str, settings: Optional[Settings] = None) -> Tuple[SymptomAnalysis, str]:
    """
    Analyze a symptom description.
    Returns: (analysis, source) where source is "llm" or "rules"
    """
    settings = settings or Settings.from_env()

    if settings.use_llm:
        try:
            analysis = analyze_with_llm(symptoms, settings)
            logger.info("Ollama analysis successful")
            return analysis, "llm"
        except LLMResponseError as e:
            logger.warning("Unusable Ollama response, using rule-based analysis: {}", e)
        except Exception:
            logger.exception("Ollama unavailable, using rule-based analysis")

    return analyze_with_rules(symptoms), "rules"
