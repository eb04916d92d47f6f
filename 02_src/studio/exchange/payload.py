"""Request payload construction for a single exchange."""

import base64
import binascii
from typing import Iterable

from ..errors import AttachmentError
from ..llm import InlinePart, Part, TextPart
from ..logging_config import get_logger
from ..models import Attachment

logger = get_logger(__name__)


def strip_data_uri(data: str) -> str:
    """Return the base64 body of a ``data:<mime>;base64,<body>`` URI."""
    if data.startswith("data:") and "," in data:
        return data.split(",", 1)[1]
    return data


def to_inline_part(attachment: Attachment) -> InlinePart:
    """Decode a binary attachment into an inline part."""
    try:
        raw = base64.b64decode(strip_data_uri(attachment.data), validate=True)
    except (binascii.Error, ValueError) as e:
        raise AttachmentError(
            f"Attachment {attachment.name} is not valid base64: {e}"
        ) from e
    return InlinePart(data=raw, mime_type=attachment.mime_type)


def merge_text_attachments(
    text: str, attachments: Iterable[Attachment]
) -> tuple[str, list[Attachment]]:
    """Split attachments by transmission path.

    Text-like attachment content is appended to the prompt; binary
    attachments are returned, in order, for inline transmission.
    """
    prompt = text
    inline: list[Attachment] = []
    for attachment in attachments:
        if attachment.kind.is_inline:
            inline.append(attachment)
        else:
            prompt += f"\n\n{attachment.data}"
    return prompt, inline


def build_parts(text: str, attachments: Iterable[Attachment] = ()) -> list[Part]:
    """Inline parts in attachment order, then the trailing text part.

    The text part is omitted only when it is empty and at least one inline
    part is present, since the API rejects empty text parts.
    """
    parts: list[Part] = []
    for attachment in attachments:
        if not attachment.kind.is_inline:
            logger.warning(
                f"Skipping {attachment.kind.value} attachment {attachment.name}: "
                "text content must be merged into the prompt"
            )
            continue
        parts.append(to_inline_part(attachment))

    if text or not parts:
        parts.append(TextPart(text=text))
    return parts
