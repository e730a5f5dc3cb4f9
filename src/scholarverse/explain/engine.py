from __future__ import annotations

import asyncio
import base64
import logging
from typing import Optional

import httpx

from scholarverse.config import AppConfig, ExplainProviderConfig
from scholarverse.errors import (
    CredentialError,
    NetworkError,
    NotFoundError,
    ValidationError,
)

log = logging.getLogger(__name__)

TEXT_PROMPT = (
    "Teach the following content in the same language as the book "
    "in the easiest way possible."
)

IMAGE_PROMPT = (
    "This image is a page from a book. Read all of the text on the page and "
    "explain it in the same language as the book, in the easiest way possible. "
    "Describe any diagrams, formulas or tables and what they mean."
)


def to_data_url(image: bytes, mime: str = "image/jpeg") -> str:
    return f"data:{mime};base64,{base64.b64encode(image).decode('ascii')}"


class ExplanationEngine:
    """Sends page text or page images to a vision-capable chat completion API."""

    def __init__(self, config: AppConfig) -> None:
        self._config = config
        self._client: Optional[httpx.AsyncClient] = None

    @property
    def provider(self) -> Optional[ExplainProviderConfig]:
        return self._config.get_active_provider()

    @property
    def is_configured(self) -> bool:
        p = self.provider
        if not p:
            return False
        if p.name == "ollama":
            return bool(p.base_url)
        return bool(p.api_key and p.base_url)

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=120.0)
        return self._client

    # ── Public API ─────────────────────────────────

    async def explain_text(
        self, page_content: str, api_key: Optional[str] = None
    ) -> str:
        if not page_content.strip():
            raise ValidationError("Could not find any text on this page to explain.")
        p = self._require_provider(api_key)
        content = f"{TEXT_PROMPT}\n\nContent: {page_content}"
        return await self._call_api(p, content, api_key)

    async def explain_image(
        self,
        image_ref: str,
        prompt: Optional[str] = None,
        api_key: Optional[str] = None,
    ) -> str:
        """Explain the page image at ``image_ref``.

        ``image_ref`` is an absolute http(s) URL, a ``data:`` URL, or a path
        under the static directory such as ``/pdfbooks/1/3.jpg``.
        """
        if not image_ref.strip():
            raise ValidationError("Image URL is required")
        # Credential is checked before the image is fetched
        p = self._require_provider(api_key)
        if image_ref.startswith("data:"):
            data_url = image_ref
        else:
            data_url = to_data_url(await self.resolve_image(image_ref))
        content: list[dict[str, object]] = [
            {"type": "text", "text": prompt or IMAGE_PROMPT},
            {"type": "image_url", "image_url": {"url": data_url}},
        ]
        return await self._call_api(p, content, api_key)

    async def resolve_image(self, image_ref: str) -> bytes:
        if image_ref.startswith(("http://", "https://")):
            return await self._fetch(image_ref)

        relative = image_ref.lstrip("/")
        static_dir = self._config.static_dir.resolve()
        local = (static_dir / relative).resolve()
        if local.is_relative_to(static_dir) and local.is_file():
            try:
                return await asyncio.to_thread(local.read_bytes)
            except OSError as e:
                log.warning("Could not read %s: %s", local, e)

        origin = self._config.fallback_origin
        if origin:
            url = f"{origin.rstrip('/')}/{relative}"
            log.info("Image %s not found locally, trying %s", relative, url)
            try:
                return await self._fetch(url)
            except NetworkError as e:
                log.warning("Fallback fetch failed: %s", e)

        raise NotFoundError(f"Image file not found: {relative}", path=relative)

    async def close(self) -> None:
        if self._client:
            await self._client.aclose()
            self._client = None

    # ── Internals ──────────────────────────────────

    def _require_provider(self, api_key: Optional[str]) -> ExplainProviderConfig:
        p = self.provider
        if not p:
            raise CredentialError("No explanation provider configured")
        if p.name != "ollama" and not (api_key or p.api_key).strip():
            raise CredentialError(
                f"API key for {p.name} is missing. Set it in your .env file."
            )
        return p

    async def _fetch(self, url: str) -> bytes:
        try:
            resp = await self._get_client().get(url)
            resp.raise_for_status()
        except httpx.HTTPStatusError as e:
            if e.response.status_code == 404:
                raise NotFoundError(f"Image file not found: {url}", path=url) from e
            log.error("Image fetch error: %s %s", e.response.status_code, url)
            raise NetworkError(
                f"Failed to fetch image: HTTP {e.response.status_code}"
            ) from e
        except httpx.RequestError as e:
            log.error("Image request error: %s %s -> %s", type(e).__name__, url, e)
            raise NetworkError(f"Failed to fetch image: {type(e).__name__} ({url})") from e
        return resp.content

    async def _call_api(
        self,
        p: ExplainProviderConfig,
        content: str | list[dict[str, object]],
        api_key: Optional[str] = None,
    ) -> str:
        headers: dict[str, str] = {"Content-Type": "application/json"}
        key = api_key or p.api_key
        if key:
            headers["Authorization"] = f"Bearer {key}"

        url = f"{p.base_url.rstrip('/')}/chat/completions"
        payload = {
            "model": p.model,
            "messages": [{"role": "user", "content": content}],
            "temperature": 0.3,
        }

        try:
            resp = await self._get_client().post(url, json=payload, headers=headers)
            resp.raise_for_status()
            data = resp.json()
            explanation = data["choices"][0]["message"]["content"]
        except httpx.HTTPStatusError as e:
            log.error(
                "Explanation API error: %s %s",
                e.response.status_code,
                e.response.text[:200],
            )
            raise NetworkError(
                f"Explanation failed: HTTP {e.response.status_code}"
            ) from e
        except (KeyError, IndexError, TypeError, ValueError) as e:
            log.error("Unexpected API response format: %s", e)
            raise NetworkError("No explanation received") from e
        except httpx.RequestError as e:
            log.error(
                "Explanation request error: %s %s -> %s",
                type(e).__name__,
                url,
                e,
            )
            raise NetworkError(f"Explanation failed: {type(e).__name__} ({url})") from e

        if not isinstance(explanation, str) or not explanation.strip():
            raise NetworkError("No explanation received")
        return explanation
