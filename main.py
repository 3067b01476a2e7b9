from pathlib import Path
from typing import Optional

from fastapi import FastAPI, File, HTTPException, Request, UploadFile
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse, Response
from loguru import logger

from symptomfinder.agent import analyze_symptoms
from symptomfinder.config import Settings
from symptomfinder.keywords import detect_emergency
from symptomfinder.report import render_report, report_filename
from symptomfinder.schemas import AnalysisResponse, ReportRequest, SymptomRequest, TranscriptionResponse
from symptomfinder.transcribe import AudioTooLargeError, check_size, transcribe_audio

MAX_SYMPTOMS_LENGTH = 500
STATIC_DIR = Path(__file__).resolve().parent / "symptomfinder" / "static"

app = FastAPI(title="Symptom to Doctor Finder", version="0.1.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=Settings.from_env().allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    logger.warning("Rejected malformed request to {}: {}", request.url.path, exc.errors())
    return JSONResponse(status_code=400, content={"detail": "Malformed request body"})


@app.get("/health")
def health():
    return {"ok": True}


@app.get("/")
def index():
    return FileResponse(STATIC_DIR / "index.html")


@app.post("/api/symptom-analysis", response_model=AnalysisResponse)
def symptom_analysis(req: SymptomRequest):
    symptoms = req.symptoms
    if not isinstance(symptoms, str) or not symptoms.strip():
        raise HTTPException(status_code=400, detail="Valid symptoms description is required")
    if len(symptoms) > MAX_SYMPTOMS_LENGTH:
        raise HTTPException(status_code=400, detail="Symptoms description too long (max 500 characters)")

    try:
        flag = detect_emergency(symptoms)
        if flag:
            logger.warning("Emergency keyword detected: '{}'", flag)
        analysis, source = analyze_symptoms(symptoms)
        return AnalysisResponse(analysis=analysis, source=source, emergency=flag is not None)
    except Exception:
        logger.exception("Symptom analysis error")
        raise HTTPException(status_code=500, detail="Internal server error")


@app.post("/api/transcribe-audio", response_model=TranscriptionResponse, response_model_exclude_none=True)
async def transcribe(audio: Optional[UploadFile] = File(None)):
    if audio is None:
        raise HTTPException(status_code=400, detail="No audio file provided")

    try:
        # reject on the declared size before buffering the upload
        check_size(audio.size)
        data = await audio.read()
        return transcribe_audio(data, audio.content_type, filename=audio.filename)
    except AudioTooLargeError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception:
        logger.exception("Transcription error")
        raise HTTPException(
            status_code=500,
            detail="Failed to transcribe audio. Please try again or type your symptoms manually.",
        )


@app.post("/api/report")
def report(req: ReportRequest):
    """Export an analysis as a downloadable PDF."""
    try:
        pdf = render_report(req.symptoms, req.analysis)
    except Exception:
        logger.exception("PDF generation error")
        raise HTTPException(status_code=500, detail="Failed to generate PDF. Please try again.")

    return Response(
        content=pdf,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{report_filename()}"'},
    )
