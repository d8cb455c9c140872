"""Extraction result and file-list schemas."""
from typing import Any, Literal, Optional, Union
from pydantic import BaseModel, ConfigDict, Field


class _CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    def to_response(self) -> dict:
        """Serialize for the wire: camelCase keys, unset optional fields dropped.

        Only this model's own fields are pruned; payloads copied from
        upstream keep their nulls.
        """
        payload = {}
        for name, field in type(self).model_fields.items():
            value = getattr(self, name)
            if value is None:
                continue
            payload[field.alias or name] = _dump(value)
        return payload


def _dump(value: Any) -> Any:
    if isinstance(value, _CamelModel):
        return value.to_response()
    if isinstance(value, list):
        return [_dump(v) for v in value]
    return value


class GuessAttempt(_CamelModel):
    """One candidate list-API request made during token discovery."""
    url: str
    status: Optional[int] = None
    error: Optional[str] = None


class GuessFileList(_CamelModel):
    """Accepted response from a candidate list-API endpoint."""
    url: str
    json_body: Optional[Any] = Field(None, alias="json")
    html: Optional[str] = None


class EmbeddedJsonResult(_CamelModel):
    """Manifest recovered from a JavaScript global assignment."""
    success: bool = True
    source: Literal["embedded-json"] = "embedded-json"
    data: Any
    pcftoken: Optional[str] = None
    js_token: Optional[str] = Field(None, alias="jsToken")
    api_domain: Optional[str] = Field(None, alias="apiDomain")
    guess_file_list: Optional[GuessFileList] = Field(None, alias="guessFileList")
    guess_attempts: Optional[list[GuessAttempt]] = Field(None, alias="guessAttempts")


class HeuristicDomResult(_CamelModel):
    """Filename-looking texts scraped from the page markup."""
    success: bool = True
    source: Literal["heuristic-dom"] = "heuristic-dom"
    data: dict[str, list[str]]


class RawResult(_CamelModel):
    """Truncated page body returned when nothing else matched."""
    success: bool = False
    source: Literal["raw"] = "raw"
    html: str


ExtractionResult = Union[EmbeddedJsonResult, HeuristicDomResult, RawResult]


class FileEntry(_CamelModel):
    """A single downloadable file."""
    name: Optional[str] = None
    size: Optional[Union[int, float]] = None
    direct_url: Optional[str] = Field(None, alias="directUrl")

    def to_response(self) -> dict:
        return self.model_dump(by_alias=True)


class NormalizedFiles(_CamelModel):
    """Outcome of turning extraction metadata into a file list."""
    ok: bool
    files: Optional[list[FileEntry]] = None
    raw: Optional[Any] = None
    message: Optional[str] = None
    metadata: Optional[Any] = None


class MetadataRequest(BaseModel):
    url: Optional[str] = None


class ExtractFilesRequest(_CamelModel):
    metadata: Optional[Any] = None
    share_url: Optional[str] = Field(None, alias="shareUrl")
