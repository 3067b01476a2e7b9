from typing import Optional

from loguru import logger

from symptomfinder.config import Settings
from symptomfinder.schemas import TranscriptionResponse

MAX_AUDIO_BYTES = 25 * 1024 * 1024  # Whisper API upload limit

# Some browsers label webm/mp4 recordings as video/*
ACCEPTED_TYPE_PREFIXES = ("audio/", "video/webm", "video/mp4")

NOT_CONFIGURED_TRANSCRIPT = (
    "Speech-to-text service is not configured. Please use the live speech recognition "
    "feature in your browser or type your symptoms manually."
)
FAILED_TRANSCRIPT = (
    "I couldn't transcribe your audio. Please try speaking more clearly or type your symptoms manually."
)


class AudioTooLargeError(ValueError):
    pass


def upload_filename(content_type: Optional[str]) -> str:
    """Pick a file name whose extension Whisper uses to detect the container."""
    content_type = content_type or ""
    if "mp4" in content_type:
        return "audio.mp4"
    if "wav" in content_type:
        return "audio.wav"
    if "m4a" in content_type:
        return "audio.m4a"
    return "audio.webm"


def check_size(size: Optional[int]) -> None:
    if size is not None and size > MAX_AUDIO_BYTES:
        raise AudioTooLargeError("File too large. Please keep recordings under 25MB.")


def check_audio(data: bytes, content_type: Optional[str]) -> None:
    check_size(len(data))
    content_type = content_type or ""
    if content_type and not content_type.startswith(ACCEPTED_TYPE_PREFIXES):
        logger.warning("Unexpected file type: {} but proceeding anyway", content_type)


def call_whisper(data: bytes, content_type: Optional[str], settings: Settings) -> str:
    from openai import OpenAI

    client = OpenAI(api_key=settings.openai_api_key, max_retries=0)
    result = client.audio.transcriptions.create(
        model=settings.whisper_model,
        file=(upload_filename(content_type), data, content_type or "application/octet-stream"),
        language=settings.transcription_language,
        response_format="json",
        temperature=0,
    )
    text = (getattr(result, "text", "") or "").strip()
    if not text:
        raise RuntimeError("No transcription text received from OpenAI")
    return text


def transcribe_audio(
    data: bytes,
    content_type: Optional[str],
    filename: Optional[str] = None,
    settings: Optional[Settings] = None,
) -> TranscriptionResponse:
    """
    Transcribe an uploaded recording with Whisper.

    Size is validated first (AudioTooLargeError). Every downstream problem,
    including a missing API key, yields success=False with a fallback transcript.
    """
    settings = settings or Settings.from_env()
    check_audio(data, content_type)
    logger.info("Processing audio file: {}, size: {} bytes, type: {}", filename, len(data), content_type)

    if not settings.openai_api_key:
        logger.warning("OpenAI API key not found, using fallback message")
        return TranscriptionResponse(
            transcript=NOT_CONFIGURED_TRANSCRIPT,
            success=False,
            message="OpenAI API key not configured - use browser speech recognition instead",
        )

    try:
        text = call_whisper(data, content_type, settings)
    except Exception as e:
        logger.exception("Whisper API error")
        return TranscriptionResponse(
            transcript=FAILED_TRANSCRIPT,
            success=False,
            message="Transcription failed - please try again or type manually",
            error=str(e) or type(e).__name__,
        )

    logger.info("Transcription successful: {}...", text[:100])
    return TranscriptionResponse(
        transcript=text,
        success=True,
        message="Audio transcribed successfully using OpenAI Whisper",
    )
