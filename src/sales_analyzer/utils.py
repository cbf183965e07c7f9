import logging
import re
from enum import Enum
from typing import NamedTuple

from .errors import InvalidURLError
from .schemas import AnalysisResult

INVALID_URL_MESSAGE = "Please enter a valid YouTube URL"

YOUTUBE_URL_RE = re.compile(r'^(https?://)?(www\.)?(youtube\.com|youtu\.?be)/.+$')


class ExportKind(str, Enum):
    STRUCTURED = "structured"
    TRANSCRIPT = "transcript"

    @classmethod
    def _missing_(cls, value):
        # The page's download button is labelled "JSON"
        if isinstance(value, str) and value.lower() == "json":
            return cls.STRUCTURED
        return None


class ExportFile(NamedTuple):
    content: bytes
    filename: str
    media_type: str


def validate_url(url: str) -> bool:
    """Check that the input looks like a YouTube video link (youtube.com or youtu.be)"""
    if not isinstance(url, str):
        return False
    return YOUTUBE_URL_RE.fullmatch(url) is not None


def ensure_valid_url(url: str) -> str:
    if not validate_url(url):
        raise InvalidURLError(INVALID_URL_MESSAGE)
    return url


def export_result(result: AnalysisResult, kind) -> ExportFile:
    """Encode a finished analysis as a downloadable file.

    ``structured`` gives the whole result as indented JSON with the same camelCase
    keys the API uses; ``transcript`` gives the transcript text untouched.
    """
    kind = ExportKind(kind)
    if kind is ExportKind.STRUCTURED:
        content = result.model_dump_json(by_alias=True, indent=2).encode("utf-8")
        export = ExportFile(content, "sales-analysis.json", "application/json")
    else:
        export = ExportFile(result.transcript.encode("utf-8"), "sales-analysis.txt", "text/plain")
    logging.info(f"Exported analysis as {kind.value} ({len(export.content)} bytes)")
    return export
