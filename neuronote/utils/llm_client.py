"""
LLM Client for the Gemini REST API
Handles study pack generation (JSON mode, multimodal input) and
speech synthesis. Transient failures are retried with backoff.
"""
import json
import re
import time
from typing import Optional, Dict, Any, List, Callable

import httpx
from pydantic import ValidationError

from config import settings
from neuronote.exceptions import (
    MissingAPIKeyError, EmptyInputError, UpstreamAPIError, MalformedResponseError
)
from neuronote.models.study_pack import StudyPack, UploadedFile, SpeechAudio
from neuronote.utils.cache_utils import get_cache_key, get_cached, set_cached
from neuronote.utils.retry import request_with_retry
from neuronote.utils.logger import get_logger

logger = get_logger(__name__)


STUDY_PACK_SYSTEM_PROMPT = """You are NeuroNote, a tutor who turns study material into tools for long-term retention.
Analyse the provided content (typed text, photos of notes, or PDF pages).

Return ONLY one valid JSON object, no markdown fences, with exactly these keys:
{
  "title": "short title for the topic",
  "summary": {
    "core_concept": "one-sentence plain-language explanation",
    "key_points": ["point", "..."],
    "short_notes": "3-5 lines for quick revision",
    "long_notes": "detailed notes covering every important idea"
  },
  "mind_map": {"label": "central topic", "children": [{"label": "subtopic", "children": [{"label": "detail"}]}]},
  "diagram": {"type": "flow | cycle | hierarchy", "steps": ["step 1", "step 2"]},
  "flashcards": [{"front": "question or term", "back": "answer or definition"}],
  "mnemonics": [{"type": "Acronym | Analogy | Story | Rhyme", "content": "the aid", "explanation": "how it maps to the material", "emoji": "one emoji"}],
  "quiz": {
    "multiple_choice": [{"question": "...", "options": ["A", "B", "C", "D"], "correct_index": 0, "explanation": "..."}],
    "true_false": [{"statement": "...", "answer": true, "explanation": "..."}],
    "fill_in_blank": [{"sentence": "The capital of France is ___.", "answer": "Paris"}]
  }
}

Aim for 8-12 flashcards, 2-4 mnemonics, and 4-6 questions in each quiz section.
Only use facts present in the material."""

_FENCE_RE = re.compile(r"^\s*```(?:json)?\s*(.*?)\s*```\s*$", re.DOTALL | re.IGNORECASE)


def build_parts(text: Optional[str], files: Optional[List[UploadedFile]] = None) -> List[Dict[str, Any]]:
    """
    Build the prompt parts for a generateContent request.

    Args:
        text: Pasted material (may be empty when files are given)
        files: Uploaded images/PDFs as base64

    Returns:
        List of text / inlineData parts
    """
    parts: List[Dict[str, Any]] = []
    if text and text.strip():
        parts.append({"text": text.strip()})
    for f in files or []:
        parts.append({
            "inlineData": {
                "mimeType": f.mime_type or "image/png",
                "data": f.data,
            }
        })
    if not parts:
        raise EmptyInputError("Please provide text or a file to analyze.")
    return parts


def parse_study_pack(raw_text: str) -> StudyPack:
    """
    Parse the model's reply text into a StudyPack.

    Tolerates a markdown code fence around the JSON and a single-element
    array wrapping the object.
    """
    if not raw_text or not raw_text.strip():
        raise MalformedResponseError("The model returned an empty response.")

    match = _FENCE_RE.match(raw_text)
    cleaned = match.group(1) if match else raw_text.strip()

    try:
        data = json.loads(cleaned)
    except json.JSONDecodeError as e:
        logger.error(f"Study pack JSON parse failed at pos {e.pos}: {cleaned[:200]}")
        raise MalformedResponseError("The model returned invalid JSON.", detail=str(e)) from e

    if isinstance(data, list) and len(data) == 1:
        data = data[0]
    if not isinstance(data, dict):
        raise MalformedResponseError("The model returned JSON that is not a single object.")

    try:
        return StudyPack.model_validate(data)
    except ValidationError as e:
        logger.error(f"Study pack failed validation: {e.error_count()} errors")
        raise MalformedResponseError(
            "The model response did not match the study pack format.",
            detail=str(e)
        ) from e


def _error_message(response: httpx.Response) -> str:
    """Pull ``error.message`` out of a Gemini error body"""
    try:
        body = response.json()
    except ValueError:
        return response.text[:300] or f"HTTP {response.status_code}"
    error = body.get("error") if isinstance(body, dict) else None
    if isinstance(error, dict) and error.get("message"):
        return error["message"]
    return f"HTTP {response.status_code}"


class GeminiClient:
    """
    Thin client over the Gemini ``generateContent`` endpoint.

    One instance owns one ``httpx.Client``. Both generation and speech go
    through ``request_with_retry`` so 429/500/503 and network errors are
    retried; everything else surfaces as a StudyPackError.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        tts_model: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        max_retries: Optional[int] = None,
        cache_ttl: Optional[int] = None,
        transport: Optional[httpx.BaseTransport] = None,
        sleep: Callable[[float], None] = time.sleep
    ):
        self.api_key = settings.GEMINI_API_KEY if api_key is None else api_key
        self.model = model or settings.GEMINI_MODEL
        self.tts_model = tts_model or settings.GEMINI_TTS_MODEL
        self.base_url = (base_url or settings.GEMINI_BASE_URL).rstrip("/")
        self.max_retries = settings.LLM_MAX_RETRIES if max_retries is None else max_retries
        self.cache_ttl = settings.CACHE_STUDY_PACK_TTL if cache_ttl is None else cache_ttl
        self._sleep = sleep
        self._http = httpx.Client(
            timeout=timeout or settings.GEMINI_TIMEOUT,
            transport=transport
        )
        logger.info(f"Initialized Gemini client with model: {self.model}")

    def is_configured(self) -> bool:
        """Check whether an API key is present"""
        return bool(self.api_key)

    def close(self):
        self._http.close()

    def _post(self, model: str, body: Dict[str, Any]) -> Dict[str, Any]:
        """POST to ``models/{model}:generateContent`` and return the JSON body"""
        if not self.api_key:
            raise MissingAPIKeyError(
                "GEMINI_API_KEY is not configured. Get a key at https://aistudio.google.com/apikey"
            )

        url = f"{self.base_url}/models/{model}:generateContent"
        response = request_with_retry(
            self._http,
            "POST",
            url,
            max_retries=self.max_retries,
            sleep=self._sleep,
            json=body,
            headers={"x-goog-api-key": self.api_key, "Content-Type": "application/json"},
        )

        if response.status_code >= 400:
            message = _error_message(response)
            logger.error(f"Gemini API error {response.status_code}: {message}")
            raise UpstreamAPIError(message, status=response.status_code)

        try:
            data = response.json()
        except ValueError as e:
            raise MalformedResponseError("The model API returned a non-JSON body.") from e

        if not isinstance(data, dict):
            raise MalformedResponseError("The model API returned an unexpected body.")
        error = data.get("error")
        if error:
            message = error.get("message") if isinstance(error, dict) else str(error)
            raise UpstreamAPIError(message or "Unknown model API error")
        return data

    @staticmethod
    def _first_part(data: Dict[str, Any]) -> Dict[str, Any]:
        """Return ``candidates[0].content.parts[0]``"""
        try:
            return data["candidates"][0]["content"]["parts"][0]
        except (KeyError, IndexError, TypeError) as e:
            block_reason = (data.get("promptFeedback") or {}).get("blockReason")
            if block_reason:
                raise MalformedResponseError(f"The request was blocked by the model ({block_reason}).") from e
            raise MalformedResponseError("The model response had no content.") from e

    def generate_study_pack(self, text: Optional[str], files: Optional[List[UploadedFile]] = None) -> StudyPack:
        """
        Generate a study pack from text and/or files.

        Args:
            text: Pasted material
            files: Uploaded images/PDFs

        Returns:
            Validated StudyPack
        """
        files = files or []
        parts = build_parts(text, files)

        cache_key = None
        if self.cache_ttl > 0:
            cache_key = get_cache_key(
                "study_pack", self.model, text or "",
                *[f"{f.mime_type}:{f.data}" for f in files]
            )
            cached = get_cached(cache_key)
            if cached is not None:
                logger.info("Study pack served from cache")
                return StudyPack.model_validate(cached)

        body = {
            "contents": [{"parts": parts}],
            "systemInstruction": {"parts": [{"text": STUDY_PACK_SYSTEM_PROMPT}]},
            "generationConfig": {"responseMimeType": "application/json"},
        }

        logger.info(f"Requesting study pack - text: {len(text or '')} chars, files: {len(files)}")
        data = self._post(self.model, body)
        part = self._first_part(data)
        pack = parse_study_pack(part.get("text", ""))
        logger.info(
            f"Study pack '{pack.title}' - {len(pack.flashcards)} cards, "
            f"{len(pack.mnemonics)} mnemonics, {pack.quiz.total_questions} questions"
        )

        if cache_key:
            set_cached(cache_key, pack.model_dump(), self.cache_ttl)
        return pack

    def synthesize_speech(self, text: str, voice: Optional[str] = None) -> SpeechAudio:
        """
        Read text aloud with a prebuilt voice.

        Returns:
            SpeechAudio carrying base64 PCM and a MIME type such as
            ``audio/L16;codec=pcm;rate=24000``
        """
        if not text or not text.strip():
            raise EmptyInputError("Nothing to read aloud.")

        body = {
            "contents": [{"parts": [{"text": text.strip()}]}],
            "generationConfig": {
                "responseModalities": ["AUDIO"],
                "speechConfig": {
                    "voiceConfig": {
                        "prebuiltVoiceConfig": {"voiceName": voice or settings.GEMINI_TTS_VOICE}
                    }
                },
            },
        }

        logger.info(f"Requesting speech - {len(text)} chars, voice: {voice or settings.GEMINI_TTS_VOICE}")
        data = self._post(self.tts_model, body)
        inline = self._first_part(data).get("inlineData") or {}
        if not inline.get("data") or not inline.get("mimeType"):
            raise MalformedResponseError("The speech response contained no audio.")
        return SpeechAudio(mime_type=inline["mimeType"], data=inline["data"])


# Singleton instance for reuse
_llm_client = None


def get_llm_client() -> GeminiClient:
    """Get or create the Gemini client instance"""
    global _llm_client
    if _llm_client is None:
        _llm_client = GeminiClient()
    return _llm_client
