"""Domain layer: errors and schemas."""

from .errors import (
    GatewayError,
    InvalidRequest,
    MalformedAIResponse,
    MissingWallet,
    StoreError,
    UpstreamUnavailable,
)
from .schemas import (
    AIResponse,
    ExecutionReceipt,
    HistoryRecord,
    RewardRecord,
    StrategyKind,
    StrategySuggestion,
)

__all__ = [
    "GatewayError",
    "MalformedAIResponse",
    "UpstreamUnavailable",
    "InvalidRequest",
    "MissingWallet",
    "StoreError",
    "AIResponse",
    "StrategySuggestion",
    "HistoryRecord",
    "RewardRecord",
    "StrategyKind",
    "ExecutionReceipt",
]
