"""Turn extraction metadata into a flat list of downloadable files."""
from typing import Any, Optional

from shareproxy.schemas import FileEntry, NormalizedFiles

# Upstream field name variants, in order of preference
NAME_FIELDS = ("filename", "name", "path", "server_filename")
SIZE_FIELDS = ("size", "filesize", "size_byte")
URL_FIELDS = ("url", "download_url", "dlink")

# Where list endpoints put their array
LIST_PAYLOAD_KEYS = ("list", "file_list", "items", "data", "files")
# Where embedded manifests put theirs
MANIFEST_KEYS = ("file_list", "files")


def _first_present(item: dict, keys: tuple) -> Any:
    for key in keys:
        value = item.get(key)
        if value is not None:
            return value
    return None


def _coerce_size(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return value
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return None
    return None


def to_file_entry(item: Any) -> FileEntry:
    """Map one upstream list element to a FileEntry."""
    if isinstance(item, str):
        return FileEntry(name=item)
    if not isinstance(item, dict):
        return FileEntry()

    name = _first_present(item, NAME_FIELDS)
    url = _first_present(item, URL_FIELDS)
    return FileEntry(
        name=str(name) if name is not None else None,
        size=_coerce_size(_first_present(item, SIZE_FIELDS)),
        direct_url=str(url) if url is not None else None,
    )


def find_payload_list(payload: Any) -> Optional[list]:
    """The file array of a list-API response, if it has a recognizable one."""
    if isinstance(payload, list):
        return payload
    if not isinstance(payload, dict):
        return None
    for key in LIST_PAYLOAD_KEYS:
        value = payload.get(key)
        if isinstance(value, list):
            return value
    return None


def find_manifest_list(data: Any) -> Optional[list]:
    """The file array of an embedded manifest, looking one ``data`` level deep."""
    scopes = [data]
    if isinstance(data, dict):
        scopes.append(data.get("data"))

    for scope in scopes:
        if not isinstance(scope, dict):
            continue
        for key in MANIFEST_KEYS:
            value = scope.get(key)
            if isinstance(value, list):
                return value
    return None


def normalize_file_list(metadata: dict, share_url: Optional[str] = None) -> NormalizedFiles:
    """
    Build the file list for a previously extracted share.

    Prefers the follow-up list-API payload, then the embedded manifest.
    When neither has a usable array the metadata is echoed back for
    inspection.
    """
    guess = metadata.get("guessFileList")
    if isinstance(guess, dict) and guess.get("json") is not None:
        payload = guess["json"]
        items = find_payload_list(payload)
        if items is None:
            return NormalizedFiles(ok=True, raw=payload)
        return NormalizedFiles(ok=True, files=[to_file_entry(item) for item in items])

    items = find_manifest_list(metadata.get("data"))
    if items is not None:
        return NormalizedFiles(ok=True, files=[to_file_entry(item) for item in items])

    share = f" for {share_url}" if share_url else ""
    return NormalizedFiles(
        ok=False,
        message=f"No file list found in metadata{share}; inspect the metadata to see what the page returned",
        metadata=metadata,
    )
