"""
Reverse image search and image downloads.

One requests.Session is shared by every worker thread. No retry adapter is
mounted: each request is attempted exactly once.
"""

from __future__ import annotations

import base64
import logging
from typing import Optional

import requests
from requests.adapters import HTTPAdapter

from ..config import (
    DEFAULT_TIMEOUT,
    DEFAULT_WORKERS,
    MAX_RESULTS,
    USER_AGENT,
    VISION_ENDPOINT,
)
from ..errors import HTTPStatusError, SearchError, TransportError
from ..models import CandidateImage

logger = logging.getLogger(__name__)


def create_session(pool_size: int = DEFAULT_WORKERS) -> requests.Session:
    """Return a requests session whose connection pool fits `pool_size` workers."""
    session = requests.Session()
    session.headers.update({"User-Agent": USER_AGENT})
    adapter = HTTPAdapter(pool_connections=pool_size, pool_maxsize=pool_size, max_retries=0)
    session.mount("https://", adapter)
    session.mount("http://", adapter)
    return session


def build_annotate_request(data: bytes, max_results: int = MAX_RESULTS) -> dict:
    """Build the JSON body for a single web detection request."""
    return {
        "requests": [
            {
                "image": {"content": base64.b64encode(data).decode("ascii")},
                "features": [{"type": "WEB_DETECTION", "maxResults": max_results}],
            }
        ]
    }


def parse_annotate_response(payload: dict) -> list[CandidateImage]:
    """
    Extract the full matching images from an annotate response.

    Raises:
        SearchError: If the response carries an error object
    """
    error = payload.get("error")
    if error:
        raise SearchError(error.get("message", "Unknown error"), kind=str(error.get("code", "")) or None)

    responses = payload.get("responses") or []
    if not responses:
        return []

    first = responses[0]
    if first.get("error"):
        err = first["error"]
        raise SearchError(err.get("message", "Unknown error"), kind=str(err.get("code", "")) or None)

    detection = first.get("webDetection") or {}
    return [
        CandidateImage(url=match["url"])
        for match in detection.get("fullMatchingImages", [])
        if match.get("url")
    ]


class VisionClient:
    """
    Thin client over a shared session.

    Safe to use from several threads at once: the only state is the session
    and the timeout, neither of which is mutated after construction.
    """

    def __init__(
        self,
        session: Optional[requests.Session] = None,
        timeout: float = DEFAULT_TIMEOUT,
        endpoint: str = VISION_ENDPOINT,
    ):
        self.session = session or create_session()
        self.timeout = timeout
        self.endpoint = endpoint

    def search(self, data: bytes, api_key: str) -> list[CandidateImage]:
        """
        Return every image that fully matches `data`.

        The Vision API sorts them by resolution in descending order.

        Raises:
            TransportError: If the request could not be sent
            SearchError: If the API rejects the request
        """
        try:
            response = self.session.post(
                self.endpoint,
                params={"key": api_key},
                json=build_annotate_request(data),
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise TransportError(f"Search request failed: {e}") from e

        try:
            payload = response.json()
        except ValueError as e:
            raise SearchError(
                f"The API response could not be deserialised: {e}",
                kind=str(response.status_code),
            ) from e

        if not response.ok:
            error = payload.get("error") if isinstance(payload, dict) else None
            message = (error or {}).get("message") or response.reason or "Request failed"
            raise SearchError(message, kind=str(response.status_code))

        if not isinstance(payload, dict):
            raise SearchError("Unexpected response body", kind=str(response.status_code))

        matches = parse_annotate_response(payload)
        logger.debug(f"Search returned {len(matches)} full matches")
        return matches

    def fetch(self, url: str) -> bytes:
        """
        Download an image.

        Raises:
            TransportError: If the server cannot be reached
            HTTPStatusError: If the server sends a non-success status
        """
        try:
            response = self.session.get(url, timeout=self.timeout)
        except requests.RequestException as e:
            raise TransportError(f"Failed to fetch {url}: {e}") from e

        if not response.ok:
            raise HTTPStatusError(response.status_code, url)

        return response.content

    def close(self) -> None:
        self.session.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()


def create_client(pool_size: int = DEFAULT_WORKERS, timeout: float = DEFAULT_TIMEOUT) -> VisionClient:
    """Create a VisionClient with its own session sized for the worker pool."""
    return VisionClient(create_session(pool_size), timeout=timeout)


__all__ = [
    'VisionClient',
    'create_client',
    'create_session',
    'build_annotate_request',
    'parse_annotate_response',
]
