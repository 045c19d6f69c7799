"""
Synchronous HTTP client for the SpeechCoach backend API.

Uses ``httpx.Client`` (sync); the session controller runs calls in a
worker thread so the UI loop is never blocked.
"""

import json
import logging

import httpx
from pydantic import ValidationError

from speechcoach.core.config import get_settings
from speechcoach.core.models import AnalysisResult, AudioArtifact

logger = logging.getLogger(__name__)


class APIError(Exception):
    """User-friendly API error with categorized message.

    Categories: "connection", "timeout", "http", "network", "unknown".
    ``code`` carries the server's error code for "http" errors when present.
    """

    def __init__(self, message: str, category: str = "unknown", code: str | None = None) -> None:
        self.message = message
        self.category = category
        self.code = code
        super().__init__(message)


class APIClient:
    """Thin synchronous wrapper around httpx for calling the FastAPI backend.

    All methods return parsed results or raise ``APIError`` with
    user-friendly messages for display in the UI.
    """

    def __init__(self, base_url: str | None = None, timeout: float | None = None) -> None:
        """Initialize the HTTP client.

        Args:
            base_url: Base URL of the backend (defaults to ``settings.api_base_url``).
            timeout: Request timeout in seconds; analysis waits on two AI
                services, so the default (``settings.api_timeout``) is generous.
        """
        settings = get_settings()
        self._base_url = (base_url or settings.api_base_url).rstrip("/")
        self._client = httpx.Client(
            base_url=self._base_url, timeout=timeout or settings.api_timeout
        )

    def _request(self, method: str, path: str, **kwargs) -> httpx.Response:
        """Execute an HTTP request with user-friendly error handling.

        Args:
            method: HTTP method name ("get", "post").
            path: API endpoint path (e.g. "/api/analyze-speech").
            **kwargs: Passed through to httpx (data, files, timeout, etc.).

        Returns:
            The httpx Response object with a successful status code.

        Raises:
            APIError: On connection, timeout, HTTP status, or network errors.
        """
        try:
            resp = getattr(self._client, method)(path, **kwargs)
            resp.raise_for_status()
            return resp
        except httpx.ConnectError:
            raise APIError(
                "Backend server is not running. "
                "Start it with: `uvicorn speechcoach.api.app:app --port 8000`",
                category="connection",
            ) from None
        except httpx.TimeoutException:
            raise APIError(
                "Request timed out. The server may be overloaded.",
                category="timeout",
            ) from None
        except httpx.HTTPStatusError as exc:
            code = None
            try:
                body = exc.response.json()
                message = body.get("error") or "Failed to analyze audio"
                code = body.get("code")
            except Exception:
                message = exc.response.text or str(exc)
            raise APIError(str(message), category="http", code=code) from None
        except httpx.HTTPError as exc:
            raise APIError(f"Network error: {exc}", category="network") from None

    # -- health --

    def health_check(self) -> dict:
        return self._request("get", "/health").json()

    def check_connection(self) -> tuple[bool, str]:
        """Check if the backend is reachable. Returns (ok, message)."""
        try:
            self.health_check()
            return True, "Connected"
        except APIError as exc:
            return False, exc.message

    # -- analysis --

    def analyze_speech(self, artifact: AudioArtifact, topic: str) -> AnalysisResult:
        """Upload a recording with its topic and return the parsed analysis.

        Raises:
            APIError: On transport or HTTP errors, and ("http") when a
                successful response body is not a valid analysis result.
        """
        resp = self._request(
            "post",
            "/api/analyze-speech",
            files={"audio": (artifact.filename, artifact.data, artifact.content_type)},
            data={"topic": topic},
        )
        try:
            return AnalysisResult.model_validate(resp.json())
        except (json.JSONDecodeError, ValidationError) as exc:
            logger.warning("Unreadable analysis response: %s", exc)
            raise APIError(
                "The server returned an unreadable analysis result.", category="http"
            ) from None
