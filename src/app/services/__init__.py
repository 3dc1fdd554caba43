"""
Application Services.

역할:
- normalize: AI 원문 → 검증된 {answer, strategies}
- advisor: 질문 → provider → normalize
- execute: 전략 실행 (시뮬레이션 기록 / 스왑 / 직접 송금)
"""

from .advisor import StrategyAdvisor, create_llm_provider
from .execute import ExecutionService
from .normalize import normalize_ai_response, strip_code_fence

__all__ = [
    "StrategyAdvisor",
    "create_llm_provider",
    "ExecutionService",
    "normalize_ai_response",
    "strip_code_fence",
]
