"""
Upload handling: turns raw uploaded bytes into inline base64 parts
"""
import base64
import mimetypes
from typing import List, Tuple

from config import settings
from neuronote.exceptions import InvalidUploadError
from neuronote.models.study_pack import UploadedFile
from neuronote.utils.logger import get_logger

logger = get_logger(__name__)

PDF_MIME = "application/pdf"


def resolve_mime_type(filename: str, content_type: str, content: bytes) -> str:
    """Best guess at the MIME type of an upload"""
    if content.startswith(b"%PDF"):
        return PDF_MIME
    if content_type and content_type != "application/octet-stream":
        return content_type.split(";")[0].strip().lower()
    guessed, _ = mimetypes.guess_type(filename or "")
    return guessed or "application/octet-stream"


def is_supported(mime_type: str) -> bool:
    """Images and PDFs are the only inline types accepted"""
    return mime_type.startswith("image/") or mime_type == PDF_MIME


def to_uploaded_file(filename: str, content_type: str, content: bytes) -> UploadedFile:
    """
    Validate one upload and encode it.

    Raises:
        InvalidUploadError: empty, too large, or unsupported type
    """
    name = filename or "upload"
    if not content:
        raise InvalidUploadError(f"'{name}' is empty.")

    max_bytes = settings.MAX_UPLOAD_MB * 1024 * 1024
    if len(content) > max_bytes:
        raise InvalidUploadError(f"'{name}' is larger than {settings.MAX_UPLOAD_MB} MB.")

    mime_type = resolve_mime_type(name, content_type, content)
    if not is_supported(mime_type):
        raise InvalidUploadError(
            f"'{name}' has unsupported type {mime_type}. Upload images or PDFs."
        )

    logger.debug(f"Accepted upload {name} ({mime_type}, {len(content)} bytes)")
    return UploadedFile(
        name=name,
        mime_type=mime_type,
        data=base64.b64encode(content).decode("ascii")
    )


def encode_uploads(raw_files: List[Tuple[str, str, bytes]]) -> List[UploadedFile]:
    """Validate and encode a batch of (filename, content_type, content) tuples"""
    if len(raw_files) > settings.MAX_UPLOAD_FILES:
        raise InvalidUploadError(f"At most {settings.MAX_UPLOAD_FILES} files can be uploaded at once.")
    return [to_uploaded_file(name, ctype, content) for name, ctype, content in raw_files]
