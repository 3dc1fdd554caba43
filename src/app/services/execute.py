"""
Strategy Execution: wallet + strategy → 실행 결과.

strategy.type 태그로 종류를 나누고 match로 분기:
- SIMULATED: 이력 1건 + 보상 1건 기록 후 mock payload 반환
- SWAP: 외부 payload builder 출력을 그대로 반환 (기록 없음)
- DIRECT_TRANSFER: {to: recipient, value: nanoton, payload: None} 반환 (기록 없음)

검증 → 기록 순서 고정. 검증 실패 시 상태 변경 없음.
"""

import asyncio
import logging
from decimal import Decimal, InvalidOperation
from typing import Any

from src.app.providers.base import PayloadBuildError, PayloadBuilder
from src.core.store import WalletStore
from src.domain.constants import (
    DEFAULT_SWAP_FROM,
    DEFAULT_SWAP_TO,
    MAX_NANOTON,
    MIN_AMOUNT_EXPONENT,
    MOCK_TX_PAYLOAD,
    NANOTON_PER_TON,
    SIMULATED_STATUS,
    SWAP_STATUS,
    TRANSFER_STATUS,
)
from src.domain.errors import InvalidRequest, UpstreamUnavailable
from src.domain.schemas import (
    ExecutionReceipt,
    HistoryRecord,
    RewardRecord,
    StrategyKind,
    now_ms,
)

logger = logging.getLogger(__name__)


# =============================================================================
# Validation
# =============================================================================


def validate_wallet_address(wallet_address: Any) -> str:
    """wallet 주소 검증 (비어있지 않은 문자열)."""
    if not isinstance(wallet_address, str) or not wallet_address:
        raise InvalidRequest("Missing or invalid walletAddress", field="walletAddress")
    return wallet_address


def validate_strategy(strategy: Any) -> dict[str, Any]:
    """strategy 검증 (title을 가진 object)."""
    if not isinstance(strategy, dict) or not strategy.get("title"):
        raise InvalidRequest("Missing or invalid strategy", field="strategy")
    return strategy


def classify_strategy(strategy: dict[str, Any]) -> StrategyKind:
    """
    strategy.type 태그 → StrategyKind.

    태그 없음 / "simulated" → SIMULATED, 알 수 없는 태그 → InvalidRequest.
    """
    tag = strategy.get("type")
    if tag is None:
        return StrategyKind.SIMULATED

    try:
        return StrategyKind(tag)
    except ValueError as e:
        raise InvalidRequest(
            f"Unsupported strategy type: {tag!r}", field="strategy.type"
        ) from e


def parse_amount(amount: Any, field: str = "amount") -> Decimal:
    """
    수량 검증. 숫자 또는 숫자 문자열 허용.

    범위: 1 nanoton 이상, MAX_NANOTON 이하 (TON 단위 입력 기준).
    """
    if amount is None or isinstance(amount, bool):
        raise InvalidRequest(f"Missing or invalid {field}", field=field)

    try:
        value = Decimal(str(amount))
    except InvalidOperation as e:
        raise InvalidRequest(f"Missing or invalid {field}", field=field) from e

    if not value.is_finite() or value <= 0:
        raise InvalidRequest(f"Missing or invalid {field}", field=field)

    # 곱셈 전 지수 범위 확인 (Decimal Overflow)
    if value.adjusted() < MIN_AMOUNT_EXPONENT or value.adjusted() > len(str(MAX_NANOTON)):
        raise InvalidRequest(f"{field} out of range", field=field)
    if value * NANOTON_PER_TON > MAX_NANOTON:
        raise InvalidRequest(f"{field} out of range", field=field)
    return value


def ton_to_nanoton(amount: Decimal) -> str:
    """TON → nanoton 문자열 (소수점 이하 버림)."""
    return str(int(amount * NANOTON_PER_TON))


# =============================================================================
# Execution Service
# =============================================================================


class ExecutionService:
    """
    전략 실행 서비스.

    Usage:
        service = ExecutionService(store, payload_builder)
        receipt = await service.execute(strategy, "0xAA")
    """

    def __init__(self, store: WalletStore, payload_builder: PayloadBuilder):
        self.store = store
        self.payload_builder = payload_builder

    async def execute(
        self,
        strategy: Any,
        wallet_address: Any,
        recipient: Any = None,
        amount: Any = None,
    ) -> ExecutionReceipt:
        """
        전략 실행.

        Raises:
            InvalidRequest: 입력 검증 실패 (상태 변경 없음)
            UpstreamUnavailable: payload builder 실패
            StoreError: 저장 실패
        """
        wallet = validate_wallet_address(wallet_address)
        strategy = validate_strategy(strategy)
        kind = classify_strategy(strategy)

        match kind:
            case StrategyKind.SIMULATED:
                return await self._execute_simulated(strategy, wallet)
            case StrategyKind.SWAP:
                return await self._execute_swap(strategy, wallet, amount)
            case StrategyKind.DIRECT_TRANSFER:
                return self._execute_transfer(strategy, wallet, recipient, amount)

    async def _execute_simulated(
        self,
        strategy: dict[str, Any],
        wallet: str,
    ) -> ExecutionReceipt:
        """이력 + 보상 기록. 파일 fsync는 worker thread에서."""
        timestamp = now_ms()
        history = HistoryRecord(strategy=strategy, timestamp=timestamp)
        reward = RewardRecord.for_execution(str(strategy["title"]), timestamp)

        await asyncio.to_thread(self.store.append_execution, wallet, history, reward)
        logger.info(f"Recorded simulated execution for {wallet}: {strategy['title']}")

        return ExecutionReceipt(
            status=SIMULATED_STATUS,
            strategy=strategy,
            wallet_address=wallet,
            tx_payload=MOCK_TX_PAYLOAD,
            kind=StrategyKind.SIMULATED,
        )

    async def _execute_swap(
        self,
        strategy: dict[str, Any],
        wallet: str,
        amount: Any,
    ) -> ExecutionReceipt:
        """외부 builder에 위임. 기록 없음."""
        offer_amount = parse_amount(amount if amount is not None else strategy.get("amount"))
        from_asset = str(strategy.get("fromAsset") or DEFAULT_SWAP_FROM)
        to_asset = str(strategy.get("toAsset") or DEFAULT_SWAP_TO)

        try:
            tx = await self.payload_builder.build_swap(
                wallet, from_asset, to_asset, float(offer_amount)
            )
        except PayloadBuildError as e:
            raise UpstreamUnavailable(
                "Failed to build swap payload",
                details=e.message,
            ) from e

        logger.info(f"Built swap payload for {wallet}: {from_asset} -> {to_asset}")
        return ExecutionReceipt(
            status=SWAP_STATUS,
            strategy=strategy,
            wallet_address=wallet,
            to=tx["to"],
            value=tx["value"],
            payload=tx["payload"],
            kind=StrategyKind.SWAP,
        )

    def _execute_transfer(
        self,
        strategy: dict[str, Any],
        wallet: str,
        recipient: Any,
        amount: Any,
    ) -> ExecutionReceipt:
        """직접 송금 payload. 기록 없음."""
        to = recipient if recipient is not None else strategy.get("recipient")
        if not isinstance(to, str) or not to:
            raise InvalidRequest("Missing or invalid recipient", field="recipient")
        value = parse_amount(amount if amount is not None else strategy.get("amount"))

        logger.info(f"Built transfer payload for {wallet} -> {to}")
        return ExecutionReceipt(
            status=TRANSFER_STATUS,
            strategy=strategy,
            wallet_address=wallet,
            to=to,
            value=ton_to_nanoton(value),
            payload=None,
            kind=StrategyKind.DIRECT_TRANSFER,
        )
