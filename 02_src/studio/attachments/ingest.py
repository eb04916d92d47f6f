"""Attachment ingestion: classify raw files and prepare their payload."""

import base64
import io
import mimetypes
import zipfile
import zlib
from pathlib import PurePosixPath

from ..errors import AttachmentError
from ..logging_config import get_logger
from ..models import Attachment, AttachmentKind

logger = get_logger(__name__)

TEXT_EXTENSIONS = frozenset(
    {
        ".js", ".ts", ".tsx", ".jsx", ".json", ".html", ".css", ".py",
        ".md", ".txt", ".xml", ".c", ".cpp", ".java",
    }
)
ARCHIVE_TEXT_EXTENSIONS = TEXT_EXTENSIONS | {".config", ".yml"}

MAX_ARCHIVE_MEMBERS = 50

GENERIC_MIME_TYPE = "application/octet-stream"


def _suffix(name: str) -> str:
    return PurePosixPath(name).suffix.lower()


def _decode(data: bytes) -> str:
    return data.decode("utf-8", errors="replace")


def resolve_mime_type(name: str, mime_type: str | None) -> str | None:
    """Use the declared type unless it is missing or generic."""
    if mime_type and mime_type != GENERIC_MIME_TYPE:
        return mime_type
    if _suffix(name) in TEXT_EXTENSIONS:
        return "text/plain"
    return mimetypes.guess_type(name)[0]


def classify(name: str, mime_type: str | None) -> AttachmentKind:
    """Pick the attachment kind from MIME type, falling back to extension."""
    if _suffix(name) in TEXT_EXTENSIONS:
        # source files win over misleading types such as video/mp2t for .ts
        return AttachmentKind.TEXT
    mime_type = resolve_mime_type(name, mime_type) or ""

    if mime_type.startswith("image/"):
        return AttachmentKind.IMAGE
    if mime_type.startswith("video/"):
        return AttachmentKind.VIDEO
    if mime_type == "application/pdf":
        return AttachmentKind.DOCUMENT
    if mime_type in ("application/zip", "application/x-zip-compressed") or _suffix(name) == ".zip":
        return AttachmentKind.ARCHIVE
    return AttachmentKind.TEXT


def to_data_uri(data: bytes, mime_type: str) -> str:
    return f"data:{mime_type};base64,{base64.b64encode(data).decode('ascii')}"


def extract_archive_text(name: str, data: bytes, max_members: int = MAX_ARCHIVE_MEMBERS) -> str:
    """Concatenate text members of a ZIP archive with path markers."""
    try:
        archive = zipfile.ZipFile(io.BytesIO(data))
    except zipfile.BadZipFile as e:
        raise AttachmentError(f"Failed to read archive {name}: {e}") from e

    extracted = f"[ARCHIVE_CONTENT: {name}]\n"
    count = 0
    with archive:
        for info in archive.infolist():
            if info.is_dir() or _suffix(info.filename) not in ARCHIVE_TEXT_EXTENSIONS:
                continue
            if count >= max_members:
                logger.info(f"Archive {name} truncated at {max_members} files")
                break
            try:
                content = _decode(archive.read(info))
            except (zipfile.BadZipFile, RuntimeError, zlib.error) as e:
                raise AttachmentError(f"Failed to read {info.filename} in {name}: {e}") from e
            extracted += f"\n--- START FILE: {info.filename} ---\n{content}\n--- END FILE ---\n"
            count += 1
    return extracted


def ingest_file(name: str, data: bytes, mime_type: str | None = None) -> Attachment:
    """Turn an uploaded file into an Attachment.

    Binary kinds carry a base64 data URI; text kinds carry decoded text with
    a header naming the source file.
    """
    kind = classify(name, mime_type)
    mime_type = resolve_mime_type(name, mime_type)

    if kind.is_inline:
        payload = to_data_uri(data, mime_type or "application/octet-stream")
    elif kind == AttachmentKind.ARCHIVE:
        mime_type = "application/zip"
        payload = extract_archive_text(name, data)
    else:
        if not mime_type or not mime_type.startswith("text/"):
            mime_type = "text/plain"
        payload = f"[FILE_CONTENT: {name}]\n{_decode(data)}"

    logger.debug(f"Ingested {name} as {kind.value} ({len(data)} bytes)")
    return Attachment(
        name=name,
        mime_type=mime_type,
        kind=kind,
        data=payload,
        size=len(data),
    )
