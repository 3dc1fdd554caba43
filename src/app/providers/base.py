"""
AI Provider 추상 인터페이스.

- Provider 추상화로 모델/벤더 교체 가능 (perplexity, anthropic)
- model_requested + model_used 기록
- 재시도 없음: 한 번 실패하면 해당 요청은 종결
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any

# =============================================================================
# Result Data Classes
# =============================================================================

@dataclass
class CompletionResult:
    """
    텍스트 생성 결과.

    text는 가공하지 않은 원문 (JSON 파싱은 normalizer 담당).
    """
    text: str
    provider: str | None = None
    model_requested: str | None = None
    model_used: str | None = None
    request_id: str | None = None

    def to_dict(self) -> dict[str, Any]:
        result = {
            "text": self.text,
            "provider": self.provider,
            "model_requested": self.model_requested,
            "model_used": self.model_used,
            "request_id": self.request_id,
        }
        return {k: v for k, v in result.items() if v is not None}


# =============================================================================
# Provider Exceptions
# =============================================================================

class ProviderError(Exception):
    """Provider 관련 에러."""

    def __init__(self, code: str, message: str, **context: Any) -> None:
        self.code = code
        self.message = message
        self.context = context
        super().__init__(f"[{code}] {message}")


class CompletionError(ProviderError):
    """텍스트 생성 호출 실패."""
    pass


class PayloadBuildError(ProviderError):
    """트랜잭션 payload 생성 실패."""
    pass


# =============================================================================
# Abstract Providers
# =============================================================================

class LLMProvider(ABC):
    """
    LLM Provider 추상 인터페이스.

    역할: prompt → 자유 텍스트 (JSON 포함 기대)
    """

    name: str = "unknown"

    @abstractmethod
    async def complete(
        self,
        prompt: str,
        *,
        system: str | None = None,
    ) -> CompletionResult:
        """
        텍스트 생성.

        Args:
            prompt: 사용자 메시지
            system: 시스템 프롬프트 (있는 경우)

        Returns:
            CompletionResult

        Raises:
            CompletionError: 전송/인증/응답 형식 오류
        """
        ...


class PayloadBuilder(ABC):
    """
    트랜잭션 payload builder 추상 인터페이스.

    역할: wallet + 자산 쌍 + 수량 → 전송 가능한 {to, value, payload}
    """

    @abstractmethod
    async def build_swap(
        self,
        wallet_address: str,
        from_asset: str,
        to_asset: str,
        amount: float,
    ) -> dict[str, Any]:
        """
        스왑 payload 생성.

        Returns:
            {"to": ..., "value": ..., "payload": ...} (builder 출력 그대로)

        Raises:
            PayloadBuildError
        """
        ...
