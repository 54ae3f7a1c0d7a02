"""
Classifier Client
=================
Asynchronous wrapper around the remote code-classification endpoint
(Hugging Face inference API by default).

Request:
    POST <classifier_url>   {"inputs": <file text>}   Bearer <api key>

Response normalisation:
    - Transport error, non-2xx status or non-JSON body → degraded result with
      error="Failed to analyze code". Never raised to the caller.
    - Success → first element of the result array, if any.
        label       defaults to "No issues detected"
        confidence  taken from the element's `score`, defaults to 0

No retries and no timeout override: the request uses httpx's default
transport settings. A slow endpoint stalls the calling request.
"""
import logging
from dataclasses import dataclass
from typing import Any, Optional

import httpx

from bugtracker.core.constants import CLASSIFIER_FAILURE, NO_ISSUES_LABEL

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Classification
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class Classification:
    """Normalised classifier outcome. Check `failed` before using label/confidence."""
    label: str = NO_ISSUES_LABEL
    confidence: float = 0.0
    raw: Any = None
    error: str = ""

    @property
    def failed(self) -> bool:
        return bool(self.error)

    def as_payload(self) -> Any:
        """Body echoed to the HTTP caller as `aiAnalysis`."""
        if self.failed:
            return {"error": self.error}
        return self.raw


def _as_float(value: Any) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return 0.0


def normalize_response(data: Any) -> Classification:
    """
    Reduce a classifier response body to (label, confidence).

    Only the first element of a list response is considered. Anything that
    is not a list of objects falls back to the defaults.
    """
    first: Optional[dict] = None
    if isinstance(data, list) and data and isinstance(data[0], dict):
        first = data[0]

    if first is None:
        return Classification(raw=data)

    label = first.get("label") or NO_ISSUES_LABEL
    confidence = max(0.0, min(1.0, _as_float(first.get("score"))))  # Clamp
    return Classification(label=str(label), confidence=confidence, raw=data)


# ---------------------------------------------------------------------------
# Client
# ---------------------------------------------------------------------------
class ClassifierClient:
    """
    Async HTTP client for the code classifier.

    Usage:
        client = ClassifierClient(url, api_key)
        result = await client.classify(source_text)
        await client.close()
    """

    def __init__(
        self,
        url: str,
        api_key: str = "",
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.url = url
        self.api_key = api_key
        self._transport = transport
        self._http: Optional[httpx.AsyncClient] = None

    async def _get_http(self) -> httpx.AsyncClient:
        """Lazy-initialise the HTTP client."""
        if self._http is None or self._http.is_closed:
            self._http = httpx.AsyncClient(transport=self._transport)
        return self._http

    async def close(self) -> None:
        if self._http and not self._http.is_closed:
            await self._http.aclose()
            self._http = None

    async def classify(self, text: str) -> Classification:
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }
        try:
            http = await self._get_http()
            resp = await http.post(self.url, json={"inputs": text}, headers=headers)
            resp.raise_for_status()
            data = resp.json()
        except httpx.HTTPStatusError as e:
            logger.error("Classifier HTTP %d: %s", e.response.status_code, e.response.reason_phrase)
            return Classification(error=CLASSIFIER_FAILURE)
        except (httpx.HTTPError, httpx.InvalidURL, ValueError) as e:
            logger.error("Classifier call failed: %s", e)
            return Classification(error=CLASSIFIER_FAILURE)

        result = normalize_response(data)
        logger.info("Classifier label=%r confidence=%.3f", result.label, result.confidence)
        return result
