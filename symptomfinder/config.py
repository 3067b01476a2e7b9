import os
from dataclasses import dataclass
from typing import List, Optional

from dotenv import load_dotenv

load_dotenv(dotenv_path=".env")


@dataclass(frozen=True)
class Settings:
    ollama_url: str
    ollama_model: str
    ollama_timeout: float
    use_llm: bool
    openai_api_key: Optional[str]
    whisper_model: str
    transcription_language: str
    allowed_origins: List[str]

    @classmethod
    def from_env(cls) -> "Settings":
        origins_env = os.getenv("ALLOWED_ORIGINS", "")
        if origins_env.strip():
            origins = [o.strip() for o in origins_env.split(",") if o.strip()]
        else:
            origins = ["*"]

        return cls(
            ollama_url=os.getenv("OLLAMA_URL", "http://localhost:11434").rstrip("/"),
            ollama_model=os.getenv("OLLAMA_MODEL", "llama3:latest"),
            ollama_timeout=float(os.getenv("OLLAMA_TIMEOUT", "30")),
            use_llm=os.getenv("SYMPTOM_USE_LLM", "1").strip() == "1",
            openai_api_key=os.getenv("OPENAI_API_KEY") or None,
            whisper_model=os.getenv("WHISPER_MODEL", "whisper-1"),
            transcription_language=os.getenv("TRANSCRIPTION_LANGUAGE", "en"),
            allowed_origins=origins,
        )
