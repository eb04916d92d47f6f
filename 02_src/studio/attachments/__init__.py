"""Attachments module."""

from .ingest import MAX_ARCHIVE_MEMBERS, classify, extract_archive_text, ingest_file

__all__ = ["ingest_file", "classify", "extract_archive_text", "MAX_ARCHIVE_MEMBERS"]
