# src/clients/gemini_client.py

"""Gemini REST client used as the price updater's text generator."""

import logging
import time
from typing import Any, Protocol

from curl_cffi import requests as curl_requests

from src.config.settings import Settings
from src.models.errors import GenerationError

# HTTP statuses worth retrying; everything else non-200 is terminal
_RETRYABLE_STATUSES: frozenset[int] = frozenset({429, 500, 502, 503, 504})


class TextGenerator(Protocol):
    """Anything that turns a prompt into free text within a time limit."""

    def generate(self, prompt: str, timeout: float) -> str:
        ...


class GeminiClient:
    """Calls ``models/{model}:generateContent`` with retries and backoff."""

    def __init__(
        self,
        api_key: str | None = None,
        model: str | None = None,
    ) -> None:
        self.logger = logging.getLogger("gold_rates.gemini")
        self.settings = Settings()
        self.api_key = (
            api_key if api_key is not None else self.settings.GEMINI_API_KEY
        )
        self.model = (model or self.settings.GEMINI_MODEL).removeprefix(
            "models/"
        )
        self.session = curl_requests.Session(
            impersonate=self.settings.IMPERSONATE_BROWSER
        )
        self._current_delay: float = self.settings.REQUEST_DELAY

    def _headers(self) -> dict[str, str]:
        if not self.api_key:
            raise GenerationError(
                "GEMINI_API_KEY is not set; cannot call the generation service"
            )
        return {
            "Content-Type": "application/json",
            "x-goog-api-key": self.api_key,
        }

    def _escalate_delay(self) -> None:
        """Double the current delay up to the configured max."""
        max_delay = (
            self.settings.REQUEST_DELAY
            * self.settings.MAX_DELAY_MULTIPLIER
        )
        self._current_delay = min(self._current_delay * 2, max_delay)
        self.logger.warning(
            "Gemini throttled, delay escalated to %.1fs",
            self._current_delay,
        )

    def _request(
        self,
        method: str,
        url: str,
        timeout: float,
        payload: dict[str, Any] | None = None,
        params: dict[str, str] | None = None,
    ) -> curl_requests.Response:
        """Send one request with retries; raise GenerationError on failure."""
        headers = self._headers()
        last_error = "no attempts made"
        for attempt in range(self.settings.MAX_RETRIES):
            try:
                resp = self.session.request(
                    method,
                    url,
                    headers=headers,
                    json=payload,
                    params=params,
                    timeout=timeout,
                )
            except Exception as exc:
                last_error = f"request error: {exc}"
                self.logger.warning(
                    "Gemini request error on attempt %d: %s",
                    attempt + 1,
                    exc,
                    exc_info=True,
                )
                time.sleep(self._current_delay * (attempt + 1))
                continue

            if resp.status_code == 200:
                self._current_delay = self.settings.REQUEST_DELAY
                return resp

            last_error = f"HTTP {resp.status_code}: {resp.text[:200]}"
            self.logger.warning(
                "Gemini HTTP %d on attempt %d",
                resp.status_code,
                attempt + 1,
            )
            if resp.status_code not in _RETRYABLE_STATUSES:
                break
            self._escalate_delay()
            time.sleep(self._current_delay)

        raise GenerationError(f"Gemini call failed ({last_error})")

    @staticmethod
    def _candidate_text(data: Any) -> str:
        """Join the text parts of the first candidate in a reply."""
        try:
            parts = data["candidates"][0]["content"]["parts"]
        except (KeyError, IndexError, TypeError):
            parts = []
        return "".join(
            str(p.get("text", "")) for p in parts if isinstance(p, dict)
        )

    def generate(self, prompt: str, timeout: float) -> str:
        """Return the model's text reply to *prompt*.

        Raises:
            GenerationError: On missing key, HTTP/transport failure,
                timeout, or a reply without any text.
        """
        url = (
            f"{self.settings.GEMINI_API_BASE}/models/"
            f"{self.model}:generateContent"
        )
        payload = {"contents": [{"parts": [{"text": prompt}]}]}
        self.logger.info("Requesting gold prices from %s", self.model)

        resp = self._request("POST", url, timeout, payload)
        try:
            data = resp.json()
        except ValueError as exc:
            raise GenerationError("Gemini returned a non-JSON body") from exc

        text = self._candidate_text(data)
        if not text.strip():
            feedback = data.get("promptFeedback") if isinstance(data, dict) else None
            raise GenerationError(
                f"Gemini returned no text (feedback: {feedback})"
            )
        self.logger.debug("Gemini response: %s", text)
        return text

    def list_models(self) -> list[str]:
        """Return model names available to this key for generateContent.

        Follows ``nextPageToken`` until the listing is exhausted.
        """
        url = f"{self.settings.GEMINI_API_BASE}/models"
        names: list[str] = []
        page_token = ""
        while True:
            params = {"pageToken": page_token} if page_token else None
            resp = self._request(
                "GET", url, self.settings.REQUEST_TIMEOUT, params=params
            )
            try:
                data = resp.json()
            except ValueError as exc:
                raise GenerationError("Gemini returned a non-JSON body") from exc

            for model in data.get("models", []):
                methods = model.get("supportedGenerationMethods", [])
                if "generateContent" in methods:
                    names.append(str(model.get("name", "")))

            page_token = str(data.get("nextPageToken") or "")
            if not page_token:
                break
        self.logger.info("Gemini lists %d generateContent models", len(names))
        return names
