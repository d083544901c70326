"""
Exception hierarchy for study pack generation.

Transient failures (network errors, 429/500/503) are retried by
``neuronote.utils.retry``. Everything raised from here is terminal and is
shown to the learner as-is.
"""
from typing import Optional


class StudyPackError(Exception):
    """Base class for terminal generation errors"""

    status_code = 500

    def __init__(self, message: str, detail: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.detail = detail


class MissingAPIKeyError(StudyPackError):
    """No Gemini API key configured"""

    status_code = 500


class EmptyInputError(StudyPackError):
    """Neither text nor files were provided"""

    status_code = 400


class InvalidUploadError(StudyPackError):
    """Upload rejected (type, size or count)"""

    status_code = 400


class UpstreamAPIError(StudyPackError):
    """The model API answered with a non-retryable error, or retries ran out"""

    status_code = 502

    def __init__(self, message: str, status: Optional[int] = None, detail: Optional[str] = None):
        super().__init__(message, detail)
        self.status = status


class TransientAPIError(UpstreamAPIError):
    """Network failure that persisted through every retry"""

    status_code = 503


class MalformedResponseError(StudyPackError):
    """The model reply could not be turned into a study pack or audio clip"""

    status_code = 502
