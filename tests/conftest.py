"""
Pytest fixtures for the gateway tests.

외부 collaborator(LLM provider, payload builder)는 stub으로 대체:
- StubProvider: 지정한 원문을 그대로 반환하거나 CompletionError 발생
- StubPayloadBuilder: 고정 payload 반환, 호출 기록
"""

from collections.abc import Generator
from pathlib import Path
from typing import Any

import pytest
from fastapi.testclient import TestClient

from src.app.main import create_app
from src.app.providers.base import (
    CompletionError,
    CompletionResult,
    LLMProvider,
    PayloadBuildError,
    PayloadBuilder,
)
from src.core.store import InMemoryWalletStore, JsonFileWalletStore

# =============================================================================
# Stub Collaborators
# =============================================================================


class StubProvider(LLMProvider):
    """원문 응답을 그대로 돌려주는 provider."""

    name = "stub"

    def __init__(self, text: str = "", error: CompletionError | None = None):
        self.text = text
        self.error = error
        self.calls: list[dict[str, Any]] = []

    async def complete(self, prompt: str, *, system: str | None = None) -> CompletionResult:
        self.calls.append({"prompt": prompt, "system": system})
        if self.error is not None:
            raise self.error
        return CompletionResult(text=self.text, provider=self.name, model_used="stub-1")


class StubPayloadBuilder(PayloadBuilder):
    """고정 payload builder."""

    def __init__(self, result: dict[str, Any] | None = None, error: PayloadBuildError | None = None):
        self.result = result or {
            "to": "EQ_ROUTER",
            "value": "1500000000",
            "payload": "te6cckEBAQEA",
        }
        self.error = error
        self.calls: list[tuple[str, str, str, float]] = []

    async def build_swap(
        self,
        wallet_address: str,
        from_asset: str,
        to_asset: str,
        amount: float,
    ) -> dict[str, Any]:
        self.calls.append((wallet_address, from_asset, to_asset, amount))
        if self.error is not None:
            raise self.error
        return dict(self.result)


# =============================================================================
# Collaborator Fixtures
# =============================================================================

@pytest.fixture
def valid_ai_text() -> str:
    """정상 AI 응답 원문."""
    return (
        '{"answer": "Stake TON for steady yield.", "strategies": ['
        '{"title": "Tonstakers", "description": "Liquid staking", "apy": "4.1%", "tvl": "3.2M"}'
        "]}"
    )


@pytest.fixture
def stub_provider(valid_ai_text: str) -> StubProvider:
    return StubProvider(text=valid_ai_text)


@pytest.fixture
def stub_builder() -> StubPayloadBuilder:
    return StubPayloadBuilder()


@pytest.fixture
def memory_store() -> InMemoryWalletStore:
    return InMemoryWalletStore()


@pytest.fixture
def file_store(tmp_path: Path) -> JsonFileWalletStore:
    return JsonFileWalletStore(tmp_path / "data" / "wallets.json")


# =============================================================================
# App Fixtures
# =============================================================================

@pytest.fixture
def test_config() -> dict:
    """테스트용 설정."""
    return {
        "ai": {"provider": "perplexity", "model": "sonar"},
        "store": {"backend": "memory"},
        "logging": {"level": "DEBUG"},
    }


@pytest.fixture
def client(
    test_config: dict,
    stub_provider: StubProvider,
    memory_store: InMemoryWalletStore,
    stub_builder: StubPayloadBuilder,
) -> Generator[TestClient, None, None]:
    """stub collaborator가 주입된 TestClient."""
    app = create_app(
        test_config,
        provider=stub_provider,
        store=memory_store,
        payload_builder=stub_builder,
    )
    with TestClient(app) as test_client:
        yield test_client
