from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Any, List, Literal, Optional

Severity = Literal["low", "medium", "high"]
Urgency = Literal["routine", "soon", "urgent", "emergency"]


def _none_to_list(v):
    return [] if v is None else v


class DietSuggestions(BaseModel):
    foods: List[str] = Field(default_factory=list)
    avoid: List[str] = Field(default_factory=list)
    supplements: List[str] = Field(default_factory=list)
    hydration: List[str] = Field(default_factory=list)

    @field_validator("foods", "avoid", "supplements", "hydration", mode="before")
    @classmethod
    def null_lists(cls, v):
        return _none_to_list(v)


class SymptomAnalysis(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    symptoms: List[str]
    possible_conditions: List[str] = Field(alias="possibleConditions")
    severity: Severity
    urgency: Urgency
    recommendations: List[str] = Field(default_factory=list)
    doctor_types: List[str] = Field(default_factory=list, alias="doctorTypes")
    confidence: float = 0.5
    red_flags: List[str] = Field(default_factory=list, alias="redFlags")
    follow_up_questions: List[str] = Field(default_factory=list, alias="followUpQuestions")
    diet_suggestions: Optional[DietSuggestions] = Field(default=None, alias="dietSuggestions")

    @field_validator("recommendations", "doctor_types", "red_flags", "follow_up_questions", mode="before")
    @classmethod
    def null_lists(cls, v):
        # models send null for sections they have nothing to say about
        return _none_to_list(v)

    @field_validator("confidence", mode="before")
    @classmethod
    def default_confidence(cls, v):
        return 0.5 if v is None else v

    @field_validator("confidence")
    @classmethod
    def clamp_confidence(cls, v: float) -> float:
        return max(0.0, min(1.0, v))

    @field_validator("severity", "urgency", mode="before")
    @classmethod
    def lower_enum(cls, v):
        # models often answer "High" or " urgent"
        if isinstance(v, str):
            return v.strip().lower()
        return v


class SymptomRequest(BaseModel):
    # type is checked in the endpoint so a non-string gets a 400, not a 422
    symptoms: Any = None


class AnalysisResponse(BaseModel):
    analysis: SymptomAnalysis
    source: Literal["llm", "rules"]
    emergency: bool = False


class TranscriptionResponse(BaseModel):
    transcript: str
    success: bool
    message: str
    error: Optional[str] = None


class ReportRequest(BaseModel):
    symptoms: str
    analysis: SymptomAnalysis
