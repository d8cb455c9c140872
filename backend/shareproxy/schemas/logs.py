"""Proxy event log schemas."""
from pydantic import BaseModel


class LogEntry(BaseModel):
    """One timestamped proxy event."""
    timestamp: str
    message: str


class LogsResponse(BaseModel):
    """All events recorded under a correlation id."""
    id: str
    logs: list[LogEntry]
