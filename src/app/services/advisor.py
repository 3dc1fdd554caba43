"""
Strategy Advisor: 사용자 질문 → AI provider → 정규화된 전략 제안.

흐름:
1. 질문 검증 (빈 문자열 reject)
2. 시스템 프롬프트 + 질문으로 provider.complete() 호출
3. normalize_ai_response()로 검증

에러:
- provider 실패 → UpstreamUnavailable (재시도 없음)
- 응답 형식 오류 → MalformedAIResponse (원문 포함)
"""

import logging
from typing import Any

from src.app.providers.anthropic import ClaudeProvider
from src.app.providers.base import CompletionError, LLMProvider
from src.app.providers.perplexity import PerplexityProvider
from src.app.services.normalize import normalize_ai_response
from src.domain.constants import STRATEGY_SYSTEM_PROMPT
from src.domain.errors import InvalidRequest, UpstreamUnavailable

logger = logging.getLogger(__name__)


def create_llm_provider(config: dict) -> LLMProvider:
    """
    config 기반 LLM provider 생성.

    config["ai"]:
        provider: "perplexity" | "anthropic" (기본 perplexity)
        model, max_tokens, temperature, base_url

    Raises:
        CompletionError: API 키 누락
        ValueError: 알 수 없는 provider
    """
    ai_config = config.get("ai", {}) or {}
    provider_name = ai_config.get("provider", "perplexity")
    max_tokens = ai_config.get("max_tokens", 512)
    temperature = ai_config.get("temperature", 0.7)

    if provider_name == "perplexity":
        kwargs: dict[str, Any] = {
            "model": ai_config.get("model", "sonar"),
            "max_tokens": max_tokens,
            "temperature": temperature,
            "timeout": ai_config.get("timeout", 60.0),
        }
        if ai_config.get("base_url"):
            kwargs["base_url"] = ai_config["base_url"]
        return PerplexityProvider(**kwargs)

    if provider_name == "anthropic":
        return ClaudeProvider(
            model=ai_config.get("model", "claude-sonnet-4-20250514"),
            max_tokens=max_tokens,
            temperature=temperature,
        )

    raise ValueError(f"Unknown AI provider: {provider_name!r}")


class StrategyAdvisor:
    """
    전략 제안 서비스.

    provider를 주입하지 않으면 첫 호출 시 config로 생성 (키 누락 시 UpstreamUnavailable).
    """

    def __init__(
        self,
        config: dict,
        provider: LLMProvider | None = None,
        system_prompt: str = STRATEGY_SYSTEM_PROMPT,
    ):
        """
        Args:
            config: 설정 (ai 섹션 포함)
            provider: LLM Provider (None이면 lazy 생성)
            system_prompt: 응답 JSON 형식을 강제하는 시스템 프롬프트
        """
        self.config = config
        self.system_prompt = system_prompt
        self._provider = provider

    @property
    def provider(self) -> LLMProvider:
        """LLM provider (lazy init)."""
        if self._provider is None:
            try:
                self._provider = create_llm_provider(self.config)
            except CompletionError as e:
                raise UpstreamUnavailable(
                    "AI provider is not configured",
                    details=e.message,
                ) from e
        return self._provider

    async def suggest(self, question: Any) -> dict[str, Any]:
        """
        질문에 대한 전략 제안.

        Args:
            question: 사용자 질문

        Returns:
            {"answer": str, "strategies": [...]}

        Raises:
            InvalidRequest: 질문 누락
            UpstreamUnavailable: provider 호출 실패
            MalformedAIResponse: 응답 형식 오류
        """
        if not isinstance(question, str) or not question.strip():
            raise InvalidRequest("Missing or invalid question", field="question")

        provider = self.provider
        try:
            result = await provider.complete(question, system=self.system_prompt)
        except CompletionError as e:
            logger.error(f"Failed to fetch from {provider.name} API: {e.message}")
            raise UpstreamUnavailable(
                f"Failed to fetch from {provider.name} API",
                details=e.message,
            ) from e

        logger.debug(f"Raw AI response: {result.text}")
        return normalize_ai_response(result.text)
