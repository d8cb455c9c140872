"""
Share page metadata extraction.

The page is fetched once and handed to an ordered list of strategies; the
first strategy to return a result wins. When none do, a truncated copy of
the page is returned so someone can look at what the site actually sent.
"""
import json
import math
import re
from dataclasses import dataclass
from typing import Any, Optional
from urllib.parse import parse_qs, quote, unquote, urlparse

import httpx
from bs4 import BeautifulSoup

from shareproxy.core.config import settings
from shareproxy.core.http import browser_headers
from shareproxy.schemas import (
    EmbeddedJsonResult,
    ExtractionResult,
    GuessAttempt,
    GuessFileList,
    HeuristicDomResult,
    RawResult,
)


def _reject_constant(name: str) -> float:
    raise ValueError(f"non-standard JSON constant {name}")


def _finite_float(literal: str) -> float:
    value = float(literal)
    if math.isinf(value):
        raise ValueError(f"number out of range: {literal}")
    return value


# Strict JSON: NaN/Infinity would not survive serializing the result back out
_decoder = json.JSONDecoder(parse_constant=_reject_constant, parse_float=_finite_float)

# Each pattern ends right where a JSON object starts
EMBEDDED_JSON_PATTERNS = [
    re.compile(r'window\.__INITIAL_STATE__\s*=\s*(?=\{)'),
    re.compile(r'window\.__INITIAL_DATA__\s*=\s*(?=\{)'),
    re.compile(r'var\s+shareinfo\s*=\s*(?=\{)'),
    re.compile(
        r'<script[^>]*>(?:(?!</script>).)*?(?=\{\s*"file_list")',
        re.IGNORECASE | re.DOTALL,
    ),
]

_PCF_TOKEN = re.compile(r'["\']?pcftoken["\']?\s*[:=]\s*["\']([^"\']+)["\']', re.IGNORECASE)
_JS_TOKEN = re.compile(r'["\']?jsToken["\']?\s*[:=]\s*["\']([^"\']+)["\']', re.IGNORECASE)
_HEX_LITERAL = re.compile(r'["\']([0-9a-fA-F]{40,})["\']')
_API_DOMAIN = re.compile(
    r'["\']?(?:apiDomain|api_domain|urlDomain)["\']?\s*[:=]\s*(?=\{)',
    re.IGNORECASE,
)
_API_DOMAIN_KEYS = ("api", "main", "url", "domain", "host")
_SHARE_ID_PARAMS = ("surl", "shareid")
_LIST_MARKERS = ("file_list", ".mp4")

_FILENAME_TEXT = re.compile(r'\.\w{2,6}$', re.ASCII)
_FILENAME_TAGS = ["a", "li", "div", "span"]


def try_parse_json(text: str, start: int = 0) -> Optional[Any]:
    """Decode the JSON value beginning at text[start], ignoring whatever follows it."""
    try:
        value, _ = _decoder.raw_decode(text, start)
    except ValueError:
        return None
    return value


def try_loads(text: str) -> Optional[Any]:
    """Decode a complete JSON document."""
    try:
        return _decoder.decode(text)
    except ValueError:
        return None


def find_embedded_json(html: str) -> Optional[Any]:
    """Return the first embedded JSON object that parses, trying patterns in order."""
    for pattern in EMBEDDED_JSON_PATTERNS:
        for match in pattern.finditer(html):
            parsed = try_parse_json(html, match.end())
            if parsed is not None:
                return parsed
    return None


def decode_js_token(raw: str) -> Optional[str]:
    """
    Pull the real token out of a percent-encoded jsToken value.

    The decoded value is a snippet of JavaScript with the token as a quoted
    hex literal, e.g. ``fn("9F3A...")``. Returns None when no literal is found.
    """
    try:
        decoded = unquote(raw, errors="strict")
    except UnicodeDecodeError:
        decoded = raw
    match = _HEX_LITERAL.search(decoded)
    return match.group(1) if match else None


def resolve_api_domain(domain_info: Any) -> Optional[str]:
    """Turn an api domain object into a base URL without a trailing slash."""
    if not isinstance(domain_info, dict):
        return None

    candidates = [domain_info.get(key) for key in _API_DOMAIN_KEYS]
    candidates += [v for v in domain_info.values() if isinstance(v, str) and v.startswith(("http://", "https://"))]

    for value in candidates:
        if isinstance(value, str) and value.strip():
            value = value.strip().rstrip("/")
            if "://" not in value:
                value = "https://" + value.lstrip("/")
            return value
    return None


def share_id_from_url(share_url: str) -> Optional[str]:
    """The share identifier carried in the page URL's query string, if any."""
    query = parse_qs(urlparse(share_url).query)
    for param in _SHARE_ID_PARAMS:
        values = query.get(param)
        if values and values[0]:
            return values[0]
    return None


@dataclass
class PageTokens:
    """Authentication tokens and API domain discovered in a share page."""
    pcftoken: Optional[str] = None
    js_token: Optional[str] = None
    api_domain: Optional[str] = None

    @property
    def has_token(self) -> bool:
        return bool(self.pcftoken or self.js_token)


def discover_tokens(html: str) -> PageTokens:
    tokens = PageTokens()

    match = _PCF_TOKEN.search(html)
    if match:
        tokens.pcftoken = match.group(1)

    match = _JS_TOKEN.search(html)
    if match:
        tokens.js_token = decode_js_token(match.group(1))

    match = _API_DOMAIN.search(html)
    if match:
        tokens.api_domain = resolve_api_domain(try_parse_json(html, match.end()))

    return tokens


@dataclass
class SharePage:
    """A fetched share page."""
    url: str
    html: str
    status_code: int = 200


class ExtractionStrategy:
    """One way of getting a manifest out of a share page."""

    name = "base"

    async def run(self, page: SharePage) -> Optional[ExtractionResult]:
        """Return a result, or None to let the next strategy try."""
        raise NotImplementedError


class EmbeddedJsonStrategy(ExtractionStrategy):
    """Manifest from a JSON global assignment, plus a follow-up list-API probe."""

    name = "embedded-json"

    def __init__(self, client: httpx.AsyncClient, list_api_paths: Optional[list[str]] = None):
        self.client = client
        self.list_api_paths = list_api_paths if list_api_paths is not None else settings.list_api_paths

    async def run(self, page: SharePage) -> Optional[EmbeddedJsonResult]:
        data = find_embedded_json(page.html)
        if data is None:
            return None

        tokens = discover_tokens(page.html)
        result = EmbeddedJsonResult(
            data=data,
            pcftoken=tokens.pcftoken,
            js_token=tokens.js_token,
            api_domain=tokens.api_domain,
        )

        share_id = share_id_from_url(page.url)
        if share_id and tokens.has_token and tokens.api_domain:
            guess, attempts = await self.probe_list_api(page.url, share_id, tokens)
            result.guess_file_list = guess
            result.guess_attempts = attempts

        return result

    async def probe_list_api(
        self,
        share_url: str,
        share_id: str,
        tokens: PageTokens,
    ) -> tuple[Optional[GuessFileList], list[GuessAttempt]]:
        """Try each candidate list endpoint until one returns something list-like."""
        headers = browser_headers(Referer=share_url)
        if tokens.pcftoken:
            headers["pcftoken"] = tokens.pcftoken
        if tokens.js_token:
            headers["jstoken"] = tokens.js_token

        attempts = []
        for path in self.list_api_paths:
            candidate = tokens.api_domain + path.format(surl=quote(share_id, safe=""))
            try:
                resp = await self.client.get(candidate, headers=headers)
            except (httpx.HTTPError, httpx.InvalidURL) as e:
                attempts.append(GuessAttempt(url=candidate, error=str(e) or type(e).__name__))
                continue

            attempts.append(GuessAttempt(url=candidate, status=resp.status_code))
            if not resp.is_success:
                continue

            body = resp.text
            content_type = resp.headers.get("content-type", "").lower()
            if "json" not in content_type and not any(marker in body for marker in _LIST_MARKERS):
                continue

            parsed = try_loads(body)
            if parsed is not None:
                return GuessFileList(url=candidate, json_body=parsed), attempts
            return GuessFileList(url=candidate, html=body[:settings.html_snippet_limit]), attempts

        return None, attempts


class HeuristicDomStrategy(ExtractionStrategy):
    """Collect element texts that look like filenames."""

    name = "heuristic-dom"

    def __init__(self, max_text_length: Optional[int] = None):
        self.max_text_length = max_text_length or settings.heuristic_text_limit

    async def run(self, page: SharePage) -> Optional[HeuristicDomResult]:
        files = self.scan(page.html)
        if not files:
            return None
        return HeuristicDomResult(data={"files": files})

    def scan(self, html: str) -> list[str]:
        soup = BeautifulSoup(html, 'html.parser')
        files = []
        for element in soup.find_all(_FILENAME_TAGS):
            text = element.get_text().strip()
            if text and len(text) < self.max_text_length and _FILENAME_TEXT.search(text):
                files.append(text)
        return files


class MetadataExtractor:
    """
    Fetches share pages and runs the extraction strategies over them.

    Only a failure of the initial page fetch raises; everything after it
    degrades to the next strategy and finally to the raw page.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        strategies: Optional[list[ExtractionStrategy]] = None,
    ):
        self.client = client
        if strategies is None:
            strategies = [EmbeddedJsonStrategy(client), HeuristicDomStrategy()]
        self.strategies = strategies

    async def fetch_page(self, share_url: str) -> SharePage:
        resp = await self.client.get(share_url, headers=browser_headers())
        return SharePage(url=share_url, html=resp.text, status_code=resp.status_code)

    async def extract(self, share_url: str) -> ExtractionResult:
        page = await self.fetch_page(share_url)
        return await self.extract_from_page(page)

    async def extract_from_page(self, page: SharePage) -> ExtractionResult:
        for strategy in self.strategies:
            result = await strategy.run(page)
            if result is not None:
                return result
        return RawResult(html=page.html[:settings.raw_html_limit])
