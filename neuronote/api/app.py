"""
FastAPI application for NeuroNote
"""
from fastapi import FastAPI, HTTPException, Request, UploadFile, File, Form, Depends
from fastapi.concurrency import run_in_threadpool
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse, Response
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.util import get_remote_address
from slowapi.errors import RateLimitExceeded
from datetime import datetime
from typing import List, Optional

from neuronote import __version__
from neuronote.exceptions import StudyPackError
from neuronote.models.study_pack import StudyPack
from neuronote.models.schemas import SpeechRequest, ErrorResponse, HealthResponse
from neuronote.api.auth import get_current_user
from neuronote.api.study_routes import router as study_router
from neuronote.utils.audio import speech_to_wav
from neuronote.utils.busy import busy_guard, BusyError
from neuronote.utils.llm_client import GeminiClient, get_llm_client
from neuronote.utils.uploads import encode_uploads
from neuronote.utils.logger import get_logger
from config import settings

logger = get_logger(__name__)


# Initialize FastAPI app
app = FastAPI(
    title="NeuroNote API",
    description="Turns notes, photos and PDFs into study packs: summary, mind map, flashcards, mnemonics and quiz",
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc"
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS.split(","),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Compress responses larger than 500 bytes (study packs are large JSON)
app.add_middleware(GZipMiddleware, minimum_size=500)

# Initialize rate limiter
limiter = Limiter(
    key_func=get_remote_address,
    default_limits=[f"{settings.RATE_LIMIT_PER_HOUR}/hour"]
)
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

# Include study routes
app.include_router(study_router)


@app.exception_handler(StudyPackError)
async def study_pack_error_handler(request: Request, exc: StudyPackError):
    """Terminal errors are shown to the learner, never retried"""
    logger.error(f"{type(exc).__name__} on {request.url.path}: {exc.message}")
    body = ErrorResponse(error=exc.message, detail=exc.detail)
    return JSONResponse(status_code=exc.status_code, content=body.model_dump())


@app.on_event("startup")
async def startup_event():
    """Initialize services on startup"""
    logger.info("Starting NeuroNote API...")
    logger.info(f"API running on {settings.API_HOST}:{settings.API_PORT}")

    if not settings.GEMINI_API_KEY:
        logger.warning("=" * 80)
        logger.warning("⚠️  GEMINI API KEY NOT CONFIGURED!")
        logger.warning("=" * 80)
        logger.warning("Study pack generation and speech will fail until a key is set.")
        logger.warning("1. Get a key at: https://aistudio.google.com/apikey")
        logger.warning("2. Add it to your .env file: GEMINI_API_KEY=your_key_here")
        logger.warning("=" * 80)
    else:
        logger.info("✅ Gemini API key configured")

    if settings.AUTH_DISABLED:
        logger.warning(f"Authentication disabled, all requests act as '{settings.LOCAL_USER_ID}'")


@app.on_event("shutdown")
async def shutdown_event():
    """Cleanup on shutdown"""
    logger.info("Shutting down NeuroNote API...")


@app.get("/", tags=["Root"])
async def root():
    """Root endpoint"""
    return {
        "message": "Welcome to NeuroNote API",
        "version": __version__,
        "docs": "/docs"
    }


@app.get("/api/v1/health", response_model=HealthResponse, tags=["Health"])
async def health_check():
    """Health check endpoint"""
    return HealthResponse(
        status="healthy",
        timestamp=datetime.now(),
        version=__version__,
        gemini_configured=bool(settings.GEMINI_API_KEY)
    )


@app.post("/api/v1/study-packs/generate",
          response_model=StudyPack,
          response_model_by_alias=False,
          tags=["Study Packs"])
@limiter.limit(f"{settings.RATE_LIMIT_PER_MINUTE}/minute")
async def generate_study_pack(
    request: Request,
    text: str = Form(""),
    files: Optional[List[UploadFile]] = File(None),
    user_id: str = Depends(get_current_user),
    client: GeminiClient = Depends(get_llm_client)
):
    """Generate a study pack from pasted text and/or uploaded images and PDFs"""
    if len(text) > settings.MAX_TEXT_CHARS:
        raise HTTPException(
            status_code=400,
            detail=f"Text is too long. Maximum length is {settings.MAX_TEXT_CHARS:,} characters."
        )

    raw_files = []
    for upload in files or []:
        content = await upload.read()
        raw_files.append((upload.filename, upload.content_type, content))
    uploads = encode_uploads(raw_files)

    try:
        with busy_guard.hold(user_id):
            logger.info(f"Generating study pack for {user_id} ({len(text)} chars, {len(uploads)} files)")
            return await run_in_threadpool(client.generate_study_pack, text, uploads)
    except BusyError:
        raise HTTPException(
            status_code=409,
            detail="A study pack or speech request is already in progress. Please wait for it to finish."
        )


@app.post("/api/v1/speech", tags=["Speech"])
@limiter.limit(f"{settings.RATE_LIMIT_PER_MINUTE}/minute")
async def synthesize_speech(
    request: Request,
    body: SpeechRequest,
    user_id: str = Depends(get_current_user),
    client: GeminiClient = Depends(get_llm_client)
):
    """Read text aloud; returns a WAV file"""
    if len(body.text) > settings.MAX_SPEECH_CHARS:
        raise HTTPException(
            status_code=400,
            detail=f"Text is too long to read aloud. Maximum length is {settings.MAX_SPEECH_CHARS:,} characters."
        )

    try:
        with busy_guard.hold(user_id):
            audio = await run_in_threadpool(client.synthesize_speech, body.text, body.voice)
    except BusyError:
        raise HTTPException(
            status_code=409,
            detail="A study pack or speech request is already in progress. Please wait for it to finish."
        )

    wav = speech_to_wav(audio)
    logger.info(f"Speech ready for {user_id}: {len(wav)} bytes")
    return Response(content=wav, media_type="audio/wav")


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    """Handle general exceptions"""
    logger.error(f"Unhandled exception: {exc}")
    return JSONResponse(
        status_code=500,
        content={"detail": "An internal error occurred"}
    )


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "neuronote.api.app:app",
        host=settings.API_HOST,
        port=settings.API_PORT,
        reload=settings.DEBUG_MODE
    )
