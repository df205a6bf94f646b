import httpx
from app.config import settings
from typing import Optional
import logging

logger = logging.getLogger(__name__)


class ClaudeError(RuntimeError):
    pass


class ClaudeClient:
    """Single-turn client for the Anthropic Messages API."""

    def __init__(self, api_key: Optional[str] = None, http_client: Optional[httpx.Client] = None):
        self.api_key = api_key if api_key is not None else settings.claude_api_key
        self.api_url = settings.claude_api_url
        self.model = settings.claude_model
        self.max_tokens = settings.claude_max_tokens
        self._http_client = http_client

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)

    def _get_headers(self) -> dict:
        return {
            "x-api-key": self.api_key or "",
            "anthropic-version": settings.claude_api_version,
            "content-type": "application/json",
        }

    def _build_payload(self, content: str) -> dict:
        return {
            "model": self.model,
            "max_tokens": self.max_tokens,
            "messages": [{"role": "user", "content": content}],
        }

    def complete(self, content: str) -> str:
        """Send one user message and return the text of the first content block"""
        if not self.is_configured:
            raise ClaudeError("Claude API key not configured")

        payload = self._build_payload(content)
        logger.info(f"Calling {self.model} (max_tokens={self.max_tokens})")
        try:
            if self._http_client is not None:
                response = self._http_client.post(self.api_url, json=payload, headers=self._get_headers())
            else:
                with httpx.Client(timeout=settings.claude_timeout_seconds) as client:
                    response = client.post(self.api_url, json=payload, headers=self._get_headers())
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as exc:
            raise ClaudeError(
                f"Claude API error {exc.response.status_code}: {exc.response.text}"
            ) from exc
        except httpx.HTTPError as exc:
            raise ClaudeError(f"Claude API call failed: {exc}") from exc
        except ValueError as exc:
            raise ClaudeError(f"Claude API returned invalid JSON: {exc}") from exc

        blocks = data.get("content") or []
        text = blocks[0].get("text") if blocks and isinstance(blocks[0], dict) else None
        if not text:
            raise ClaudeError("No content received from Claude API")
        return text
