"""Exchange module."""

from .cancellation import CancellationToken
from .payload import build_parts, merge_text_attachments, strip_data_uri
from .stream import FragmentSequence, StreamingExchange

__all__ = [
    "CancellationToken",
    "FragmentSequence",
    "StreamingExchange",
    "build_parts",
    "merge_text_attachments",
    "strip_data_uri",
]
