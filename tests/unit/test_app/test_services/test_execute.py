"""
test_execute.py - 전략 실행 서비스 테스트

- SIMULATED: 이력 + 보상 기록
- SWAP: builder 위임, 기록 없음
- DIRECT_TRANSFER: 로컬 payload, 기록 없음
- 검증 실패 시 상태 변경 없음
"""

from decimal import Decimal

import pytest

from src.app.providers.base import PayloadBuildError
from src.app.services.execute import (
    ExecutionService,
    classify_strategy,
    parse_amount,
    ton_to_nanoton,
)
from src.domain.constants import MAX_NANOTON, MOCK_TX_PAYLOAD, NANOTON_PER_TON
from src.domain.errors import InvalidRequest, StoreError, UpstreamUnavailable
from src.domain.schemas import StrategyKind


@pytest.fixture
def service(memory_store, stub_builder) -> ExecutionService:
    return ExecutionService(memory_store, stub_builder)


# =============================================================================
# classify_strategy 테스트
# =============================================================================


class TestClassifyStrategy:
    """type 태그 분류."""

    def test_no_tag_is_simulated(self):
        assert classify_strategy({"title": "S1"}) == StrategyKind.SIMULATED

    def test_explicit_simulated(self):
        assert classify_strategy({"title": "S1", "type": "simulated"}) == StrategyKind.SIMULATED

    def test_swap(self):
        assert classify_strategy({"title": "S1", "type": "swap"}) == StrategyKind.SWAP

    def test_transfer(self):
        assert (
            classify_strategy({"title": "S1", "type": "transfer"})
            == StrategyKind.DIRECT_TRANSFER
        )

    @pytest.mark.parametrize("tag", ["stake", "", 1, ["swap"]])
    def test_unknown_tag(self, tag):
        with pytest.raises(InvalidRequest):
            classify_strategy({"title": "S1", "type": tag})


# =============================================================================
# Amount helpers
# =============================================================================


class TestAmount:
    """수량 파싱 / 변환."""

    @pytest.mark.parametrize("value", [1, 1.5, "2", "0.25"])
    def test_valid(self, value):
        assert parse_amount(value) == Decimal(str(value))

    @pytest.mark.parametrize("value", [None, 0, -1, "abc", True, "nan", "inf"])
    def test_invalid(self, value):
        with pytest.raises(InvalidRequest):
            parse_amount(value)

    @pytest.mark.parametrize(
        "value", ["1e5000", "1e999999999", "1e-999999999", "0.0000000001", 2**128]
    )
    def test_out_of_range(self, value):
        """1 nanoton 미만 / uint128 nanoton 초과."""
        with pytest.raises(InvalidRequest):
            parse_amount(value)

    def test_upper_bound(self):
        """MAX_NANOTON 경계."""
        limit = Decimal(MAX_NANOTON) / NANOTON_PER_TON

        assert parse_amount("1e20") == Decimal("1e20")
        with pytest.raises(InvalidRequest):
            parse_amount(limit * 2)

    def test_ton_to_nanoton(self):
        assert ton_to_nanoton(Decimal("1.5")) == "1500000000"
        assert ton_to_nanoton(Decimal("0.000000001")) == "1"


# =============================================================================
# SIMULATED
# =============================================================================


class TestSimulatedExecution:
    """시뮬레이션 실행 → 이력/보상 기록."""

    @pytest.mark.asyncio
    async def test_receipt(self, service):
        """응답 형식."""
        strategy = {"title": "S1", "apy": "5%"}

        receipt = await service.execute(strategy, "0xAA")

        assert receipt.to_dict() == {
            "status": "Strategy execution simulated",
            "txPayload": MOCK_TX_PAYLOAD,
            "strategy": strategy,
            "walletAddress": "0xAA",
        }

    @pytest.mark.asyncio
    async def test_records_history_and_reward(self, service, memory_store):
        """이력 1건 + 보상 1건."""
        await service.execute({"title": "S1"}, "0xAA")

        history = memory_store.get_history("0xAA")
        rewards = memory_store.get_rewards("0xAA")
        assert len(history) == 1
        assert history[0]["strategy"] == {"title": "S1"}
        assert isinstance(history[0]["timestamp"], int)
        assert rewards == [
            {"type": "star", "detail": "Executed: S1", "timestamp": rewards[0]["timestamp"]}
        ]

    @pytest.mark.asyncio
    async def test_two_executions_in_order(self, service, memory_store):
        """S1 → S2 순서 유지."""
        await service.execute({"title": "S1"}, "0xAA")
        await service.execute({"title": "S2"}, "0xAA")

        history = memory_store.get_history("0xAA")
        assert [h["strategy"] for h in history] == [{"title": "S1"}, {"title": "S2"}]
        assert [r["detail"] for r in memory_store.get_rewards("0xAA")] == [
            "Executed: S1",
            "Executed: S2",
        ]

    @pytest.mark.asyncio
    async def test_n_executions(self, service, memory_store):
        """N번 실행 → 길이 N."""
        for i in range(5):
            await service.execute({"title": f"S{i}"}, "0xAA")

        assert len(memory_store.get_history("0xAA")) == 5
        assert len(memory_store.get_rewards("0xAA")) == 5

    @pytest.mark.asyncio
    async def test_wallets_are_partitioned(self, service, memory_store):
        """wallet 별로 분리."""
        await service.execute({"title": "S1"}, "0xAA")
        await service.execute({"title": "S2"}, "0xBB")

        assert [h["strategy"]["title"] for h in memory_store.get_history("0xAA")] == ["S1"]
        assert [h["strategy"]["title"] for h in memory_store.get_history("0xBB")] == ["S2"]

    @pytest.mark.asyncio
    async def test_store_failure_propagates(self, stub_builder):
        """저장 실패 → StoreError 전파."""

        class FailingStore:
            def append_execution(self, wallet_address, history, reward):
                raise StoreError("Failed to persist execution record")

        service = ExecutionService(FailingStore(), stub_builder)

        with pytest.raises(StoreError):
            await service.execute({"title": "S1"}, "0xAA")


# =============================================================================
# Validation
# =============================================================================


class TestValidation:
    """검증 실패 → 상태 변경 없음."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("wallet", [None, "", 123, {"a": 1}])
    async def test_invalid_wallet(self, service, memory_store, wallet):
        with pytest.raises(InvalidRequest):
            await service.execute({"title": "S1"}, wallet)

        assert memory_store._history == {}
        assert memory_store._rewards == {}

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "strategy",
        [None, "S1", ["S1"], {}, {"description": "no title"}, {"title": ""}],
    )
    async def test_invalid_strategy(self, service, memory_store, strategy):
        with pytest.raises(InvalidRequest):
            await service.execute(strategy, "0xAA")

        assert memory_store.get_history("0xAA") == []
        assert memory_store.get_rewards("0xAA") == []

    @pytest.mark.asyncio
    async def test_unknown_type_no_mutation(self, service, memory_store, stub_builder):
        with pytest.raises(InvalidRequest):
            await service.execute({"title": "S1", "type": "stake"}, "0xAA")

        assert memory_store.get_history("0xAA") == []
        assert stub_builder.calls == []


# =============================================================================
# SWAP
# =============================================================================


class TestSwapExecution:
    """스왑 → builder 출력 그대로, 기록 없음."""

    @pytest.mark.asyncio
    async def test_returns_builder_output(self, service, stub_builder):
        strategy = {"title": "Swap", "type": "swap", "fromAsset": "TON", "toAsset": "STON"}

        receipt = await service.execute(strategy, "EQ_USER", amount=1.5)

        assert receipt.to_dict() == {
            "status": "Swap payload built",
            "strategy": strategy,
            "walletAddress": "EQ_USER",
            "to": "EQ_ROUTER",
            "value": "1500000000",
            "payload": "te6cckEBAQEA",
        }
        assert stub_builder.calls == [("EQ_USER", "TON", "STON", 1.5)]

    @pytest.mark.asyncio
    async def test_default_assets_and_strategy_amount(self, service, stub_builder):
        """자산 기본값 + strategy.amount 사용."""
        await service.execute({"title": "Swap", "type": "swap", "amount": "2"}, "EQ_USER")

        assert stub_builder.calls == [("EQ_USER", "TON", "USDT", 2.0)]

    @pytest.mark.asyncio
    async def test_does_not_record(self, service, memory_store):
        await service.execute({"title": "Swap", "type": "swap"}, "EQ_USER", amount=1)

        assert memory_store.get_history("EQ_USER") == []
        assert memory_store.get_rewards("EQ_USER") == []

    @pytest.mark.asyncio
    async def test_missing_amount(self, service, stub_builder):
        with pytest.raises(InvalidRequest):
            await service.execute({"title": "Swap", "type": "swap"}, "EQ_USER")

        assert stub_builder.calls == []

    @pytest.mark.asyncio
    async def test_huge_amount_not_sent_to_builder(self, service, stub_builder):
        """float 변환 전 범위 검증 (inf 전송 없음)."""
        with pytest.raises(InvalidRequest):
            await service.execute({"title": "Swap", "type": "swap"}, "EQ_USER", amount="1e5000")

        assert stub_builder.calls == []

    @pytest.mark.asyncio
    async def test_builder_failure(self, service, stub_builder):
        stub_builder.error = PayloadBuildError("PAYLOAD_BUILD_FAILED", "router down")

        with pytest.raises(UpstreamUnavailable) as exc_info:
            await service.execute({"title": "Swap", "type": "swap"}, "EQ_USER", amount=1)

        assert exc_info.value.context["details"] == "router down"


# =============================================================================
# DIRECT_TRANSFER
# =============================================================================


class TestTransferExecution:
    """직접 송금 → 로컬 payload, 기록 없음."""

    @pytest.mark.asyncio
    async def test_builds_transfer(self, service, memory_store, stub_builder):
        strategy = {"title": "Send", "type": "transfer"}

        receipt = await service.execute(strategy, "EQ_USER", recipient="EQ_FRIEND", amount="1.5")

        assert receipt.to_dict() == {
            "status": "Transfer payload built",
            "strategy": strategy,
            "walletAddress": "EQ_USER",
            "to": "EQ_FRIEND",
            "value": "1500000000",
            "payload": None,
        }
        assert memory_store.get_history("EQ_USER") == []
        assert stub_builder.calls == []

    @pytest.mark.asyncio
    async def test_recipient_from_strategy(self, service):
        strategy = {"title": "Send", "type": "transfer", "recipient": "EQ_FRIEND", "amount": 2}

        receipt = await service.execute(strategy, "EQ_USER")

        assert receipt.to == "EQ_FRIEND"
        assert receipt.value == "2000000000"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("recipient", [None, "", 5])
    async def test_invalid_recipient(self, service, recipient):
        with pytest.raises(InvalidRequest):
            await service.execute(
                {"title": "Send", "type": "transfer"}, "EQ_USER", recipient=recipient, amount=1
            )

    @pytest.mark.asyncio
    async def test_invalid_amount(self, service):
        with pytest.raises(InvalidRequest):
            await service.execute(
                {"title": "Send", "type": "transfer"}, "EQ_USER", recipient="EQ_FRIEND", amount=-1
            )
