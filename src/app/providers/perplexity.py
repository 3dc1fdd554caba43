"""
Perplexity Provider (기본 provider).

OpenAI 호환 chat/completions API를 httpx로 직접 호출.
- Bearer 토큰 인증 (PERPLEXITY_API_KEY)
- 응답 텍스트: choices[0].message.content
- 재시도 없음
"""

import logging
import os
from typing import Any

import httpx

from .base import CompletionError, CompletionResult, LLMProvider

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.perplexity.ai"
DEFAULT_MODEL = "sonar"


class PerplexityProvider(LLMProvider):
    """
    Perplexity API Provider.

    Usage:
        provider = PerplexityProvider(model="sonar")
        result = await provider.complete(question, system=system_prompt)
    """

    name = "perplexity"

    def __init__(
        self,
        model: str = DEFAULT_MODEL,
        api_key: str | None = None,
        base_url: str = DEFAULT_BASE_URL,
        max_tokens: int = 512,
        temperature: float | None = 0.7,
        timeout: float = 60.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """
        Args:
            model: 모델 ID (config에서 주입)
            api_key: API 키 (없으면 PERPLEXITY_API_KEY 환경변수)
            base_url: API base URL
            max_tokens: 최대 토큰 수
            temperature: 샘플링 온도 (None이면 API 기본값)
            timeout: HTTP 타임아웃 (초)
            transport: httpx transport (테스트용 MockTransport 주입)

        Raises:
            CompletionError: API 키가 없을 때 (fail-fast)
        """
        self.model = model
        self.api_key = api_key or os.environ.get("PERPLEXITY_API_KEY")

        if not self.api_key:
            raise CompletionError(
                "PERPLEXITY_KEY_MISSING",
                "Perplexity API key is missing. Set PERPLEXITY_API_KEY.",
            )

        self.base_url = base_url.rstrip("/")
        self.max_tokens = max_tokens
        self.temperature = temperature
        self.timeout = timeout
        self._transport = transport

    def _build_body(self, prompt: str, system: str | None) -> dict[str, Any]:
        """chat/completions 요청 body 구성."""
        messages: list[dict[str, str]] = []
        if system:
            messages.append({"role": "system", "content": system})
        messages.append({"role": "user", "content": prompt})

        body: dict[str, Any] = {
            "model": self.model,
            "messages": messages,
            "max_tokens": self.max_tokens,
        }
        if self.temperature is not None:
            body["temperature"] = self.temperature
        return body

    async def complete(
        self,
        prompt: str,
        *,
        system: str | None = None,
    ) -> CompletionResult:
        url = f"{self.base_url}/chat/completions"
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

        try:
            async with httpx.AsyncClient(
                timeout=self.timeout,
                transport=self._transport,
            ) as client:
                response = await client.post(
                    url,
                    json=self._build_body(prompt, system),
                    headers=headers,
                )
                response.raise_for_status()
                data = response.json()
        except httpx.HTTPStatusError as e:
            logger.error(
                f"Perplexity API returned {e.response.status_code}: {e.response.text[:200]}"
            )
            raise CompletionError(
                "COMPLETION_FAILED",
                f"Perplexity API returned HTTP {e.response.status_code}",
                status=e.response.status_code,
            ) from e
        except httpx.HTTPError as e:
            logger.error(f"Perplexity API call failed: {e}")
            raise CompletionError(
                "COMPLETION_FAILED",
                f"Perplexity API call failed: {e}",
            ) from e
        except ValueError as e:
            # 응답이 JSON이 아님
            raise CompletionError(
                "COMPLETION_FAILED",
                "Perplexity API returned a non-JSON body",
            ) from e

        try:
            text = data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError) as e:
            raise CompletionError(
                "COMPLETION_FAILED",
                "Perplexity API response missing choices[0].message.content",
            ) from e

        if not isinstance(text, str):
            raise CompletionError(
                "COMPLETION_FAILED",
                "Perplexity API returned non-text content",
            )

        return CompletionResult(
            text=text,
            provider=self.name,
            model_requested=self.model,
            model_used=data.get("model", self.model),
            request_id=data.get("id"),
        )
