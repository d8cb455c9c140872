"""Pydantic schemas."""
from shareproxy.schemas.extraction import (
    EmbeddedJsonResult,
    HeuristicDomResult,
    RawResult,
    ExtractionResult,
    GuessAttempt,
    GuessFileList,
    FileEntry,
    NormalizedFiles,
    MetadataRequest,
    ExtractFilesRequest,
)
from shareproxy.schemas.logs import LogEntry, LogsResponse

__all__ = [
    "EmbeddedJsonResult",
    "HeuristicDomResult",
    "RawResult",
    "ExtractionResult",
    "GuessAttempt",
    "GuessFileList",
    "FileEntry",
    "NormalizedFiles",
    "MetadataRequest",
    "ExtractFilesRequest",
    "LogEntry",
    "LogsResponse",
]
