"""
Data schemas for the gateway.

규칙:
- 필드명은 wire 포맷(JSON)과 동일하게 유지 (walletAddress, txPayload 등은 to_dict에서 변환)
- HistoryRecord / RewardRecord는 append-only, 생성 후 변경 금지
- timestamp는 epoch milliseconds (int)
"""

import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from src.domain.constants import (
    REWARD_DETAIL_PREFIX,
    REWARD_TYPE_STAR,
    STRATEGY_TYPE_SWAP,
    STRATEGY_TYPE_TRANSFER,
)


def now_ms() -> int:
    """현재 시각 (epoch ms)."""
    return int(time.time() * 1000)


# =============================================================================
# AI Response Schemas
# =============================================================================

@dataclass(frozen=True)
class StrategySuggestion:
    """AI가 제안한 DeFi 전략 카드 한 장."""
    title: str
    description: str = ""
    apy: str = ""
    tvl: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "StrategySuggestion":
        return cls(
            title=str(data.get("title", "")),
            description=str(data.get("description", "")),
            apy=str(data.get("apy", "")),
            tvl=str(data.get("tvl", "")),
        )

    def to_dict(self) -> dict[str, str]:
        return {
            "title": self.title,
            "description": self.description,
            "apy": self.apy,
            "tvl": self.tvl,
        }


@dataclass
class AIResponse:
    """
    정규화된 AI 응답.

    불변식: answer 비어있지 않음, strategies는 리스트 (빈 리스트 허용)
    """
    answer: str
    strategies: list[dict[str, Any]] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {"answer": self.answer, "strategies": self.strategies}


# =============================================================================
# Per-Wallet Records
# =============================================================================

@dataclass(frozen=True)
class HistoryRecord:
    """전략 실행 이력 한 건."""
    strategy: dict[str, Any]
    timestamp: int

    def to_dict(self) -> dict[str, Any]:
        return {"strategy": self.strategy, "timestamp": self.timestamp}


@dataclass(frozen=True)
class RewardRecord:
    """실행 보상 한 건 (현재는 star만)."""
    type: str
    detail: str
    timestamp: int

    @classmethod
    def for_execution(cls, title: str, timestamp: int) -> "RewardRecord":
        return cls(
            type=REWARD_TYPE_STAR,
            detail=f"{REWARD_DETAIL_PREFIX}{title}",
            timestamp=timestamp,
        )

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.type, "detail": self.detail, "timestamp": self.timestamp}


# =============================================================================
# Execution
# =============================================================================

class StrategyKind(str, Enum):
    """
    전략 실행 종류.

    strategy.type 태그로 결정:
    - 태그 없음 → SIMULATED (이력/보상 기록)
    - "swap" → SWAP (외부 payload builder)
    - "transfer" → DIRECT_TRANSFER (직접 송금 payload)
    """
    SIMULATED = "simulated"
    SWAP = STRATEGY_TYPE_SWAP
    DIRECT_TRANSFER = STRATEGY_TYPE_TRANSFER


@dataclass
class ExecutionReceipt:
    """POST /execute-strategy 응답."""
    status: str
    strategy: dict[str, Any]
    wallet_address: str
    tx_payload: str | None = None

    # on-chain payload (SWAP / DIRECT_TRANSFER)
    to: str | None = None
    value: str | None = None
    payload: str | None = None
    kind: StrategyKind = StrategyKind.SIMULATED

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "status": self.status,
            "strategy": self.strategy,
            "walletAddress": self.wallet_address,
        }
        if self.kind == StrategyKind.SIMULATED:
            result["txPayload"] = self.tx_payload
        else:
            # builder 출력은 그대로 (payload None 포함)
            result["to"] = self.to
            result["value"] = self.value
            result["payload"] = self.payload
        return result
