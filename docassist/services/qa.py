# docassist/services/qa.py
from __future__ import annotations

import logging
from typing import Optional

import httpx
from pydantic import BaseModel

from docassist.core.config import QA_ENDPOINT_URL, QA_TIMEOUT_SECONDS, QA_TOP_K

log = logging.getLogger("qa")


class QAResult(BaseModel):
    ok: bool
    answer: Optional[str] = None
    error: Optional[str] = None


class QAClient:
    """
    Async client for the external question-answering endpoint.

    ``POST {"query": ..., "top_k": ...}`` -> ``{"ai_response": ...}``.
    Failures come back as ``QAResult(ok=False)``; ``ask`` never raises for
    HTTP or transport errors.
    """

    def __init__(
        self,
        client: Optional[httpx.AsyncClient] = None,
        url: str = QA_ENDPOINT_URL,
        top_k: int = QA_TOP_K,
        timeout: float = QA_TIMEOUT_SECONDS,
    ):
        self._owns_client = client is None
        self.client = client or httpx.AsyncClient(timeout=timeout)
        self.url = url
        self.top_k = top_k
        self.timeout = timeout

    async def ask(self, question: str) -> QAResult:
        log.info("QA query top_k=%d, chars=%d", self.top_k, len(question))
        try:
            resp = await self.client.post(
                self.url,
                json={"query": question, "top_k": self.top_k},
                timeout=self.timeout,
            )
        except httpx.TimeoutException:
            log.error("Error fetching AI response: timed out after %.1fs", self.timeout)
            return QAResult(ok=False, error="timeout")
        except httpx.HTTPError as e:
            log.error("Error fetching AI response: %s", e)
            return QAResult(ok=False, error=f"transport error: {e}")

        if resp.status_code != 200:
            log.error("Error fetching AI response: HTTP %d", resp.status_code)
            return QAResult(ok=False, error=f"HTTP {resp.status_code}")
        try:
            answer = resp.json().get("ai_response")
        except (ValueError, AttributeError):
            answer = None
        if not isinstance(answer, str):
            log.error("Error fetching AI response: malformed body")
            return QAResult(ok=False, error="malformed response")
        return QAResult(ok=True, answer=answer)

    async def aclose(self) -> None:
        if self._owns_client:
            await self.client.aclose()
