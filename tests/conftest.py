from __future__ import annotations

import dataclasses

import pytest

from symptomfinder.config import Settings


@pytest.fixture(autouse=True)
def offline_env(monkeypatch):
    monkeypatch.setenv("SYMPTOM_USE_LLM", "0")
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    for name in ("OLLAMA_URL", "OLLAMA_MODEL", "OLLAMA_TIMEOUT", "WHISPER_MODEL", "TRANSCRIPTION_LANGUAGE"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def llm_settings() -> Settings:
    return dataclasses.replace(Settings.from_env(), use_llm=True, ollama_url="http://ollama.test:11434")


@pytest.fixture
def whisper_settings() -> Settings:
    return dataclasses.replace(Settings.from_env(), openai_api_key="sk-test")
