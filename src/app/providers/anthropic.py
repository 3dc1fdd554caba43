"""
Anthropic (Claude) Provider.

Perplexity 대신 사용할 수 있는 대체 provider (config ai.provider: anthropic).
- model_requested + model_used 기록
- 재시도 없음: 실패 시 CompletionError
"""

import logging
import os
from typing import Any

from .base import CompletionError, CompletionResult, LLMProvider

logger = logging.getLogger(__name__)


class ClaudeProvider(LLMProvider):
    """
    Claude API Provider.

    Usage:
        provider = ClaudeProvider(model="claude-sonnet-4-20250514")
        result = await provider.complete(question, system=system_prompt)
    """

    name = "anthropic"

    def __init__(
        self,
        model: str = "claude-sonnet-4-20250514",
        api_key: str | None = None,
        max_tokens: int = 512,
        temperature: float | None = None,
    ):
        """
        Args:
            model: 모델 ID (config에서 주입)
            api_key: API 키 (없으면 ANTHROPIC_API_KEY 환경변수)
            max_tokens: 최대 토큰 수
            temperature: 샘플링 온도 (None이면 API 기본값)

        Raises:
            CompletionError: API 키가 없을 때 (fail-fast)
        """
        self.model = model
        self.api_key = api_key or os.environ.get("ANTHROPIC_API_KEY")

        # Fail-fast: 키가 없으면 즉시 에러 (나중에 모호한 에러 방지)
        if not self.api_key:
            raise CompletionError(
                "ANTHROPIC_KEY_MISSING",
                "Anthropic API key is missing. Set ANTHROPIC_API_KEY.",
            )

        self.max_tokens = max_tokens
        self.temperature = temperature
        self._client: Any = None

    def _get_client(self) -> Any:
        """Anthropic 클라이언트 (lazy init)."""
        if self._client is None:
            import anthropic

            self._client = anthropic.AsyncAnthropic(api_key=self.api_key)
        return self._client

    async def complete(
        self,
        prompt: str,
        *,
        system: str | None = None,
    ) -> CompletionResult:
        api_kwargs: dict[str, Any] = {
            "model": self.model,
            "max_tokens": self.max_tokens,
            "messages": [{"role": "user", "content": prompt}],
        }
        if system:
            api_kwargs["system"] = system
        if self.temperature is not None:
            api_kwargs["temperature"] = self.temperature

        try:
            client = self._get_client()
            response = await client.messages.create(**api_kwargs)
            text: str = response.content[0].text
        except Exception as e:
            logger.error(f"Claude API call failed: {e}")
            raise CompletionError(
                "COMPLETION_FAILED",
                f"Claude API call failed: {e}",
            ) from e

        return CompletionResult(
            text=text,
            provider=self.name,
            model_requested=self.model,
            model_used=getattr(response, "model", self.model),
            request_id=getattr(response, "id", None),
        )
