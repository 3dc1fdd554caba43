"""
test_anthropic.py - Claude Provider 테스트

Mock 주의사항:
- MagicMock은 접근되지 않은 속성에 자동으로 새 MagicMock을 반환
- response.model, response.id 등 실제 API 응답 속성을 명시적으로 설정해야 함
- make_anthropic_response() factory 사용 권장
"""

from unittest.mock import AsyncMock, MagicMock

import pytest

from src.app.providers.anthropic import ClaudeProvider
from src.app.providers.base import CompletionError

# =============================================================================
# Mock Factories
# =============================================================================


def make_anthropic_response(
    text: str,
    model: str = "claude-sonnet-4-20250514",
    request_id: str = "msg_test_default",
) -> MagicMock:
    """Anthropic Message 응답을 모방한 MagicMock."""
    response = MagicMock()
    response.content = [MagicMock()]
    response.content[0].text = text
    response.model = model  # 명시적 설정 필수!
    response.id = request_id  # 명시적 설정 필수!
    return response


@pytest.fixture
def provider():
    """기본 Claude provider."""
    return ClaudeProvider(api_key="test-api-key")


def attach_client(provider: ClaudeProvider, create: AsyncMock) -> None:
    client = MagicMock()
    client.messages.create = create
    provider._client = client


# =============================================================================
# 초기화 테스트
# =============================================================================


class TestClaudeProviderInit:
    """ClaudeProvider 초기화 테스트."""

    def test_init_with_defaults(self, provider):
        assert provider.model == "claude-sonnet-4-20250514"
        assert provider.max_tokens == 512

    def test_init_uses_env_api_key(self, monkeypatch):
        monkeypatch.setenv("ANTHROPIC_API_KEY", "env-api-key")

        assert ClaudeProvider().api_key == "env-api-key"

    def test_missing_key_fails_fast(self, monkeypatch):
        monkeypatch.delenv("ANTHROPIC_API_KEY", raising=False)

        with pytest.raises(CompletionError) as exc_info:
            ClaudeProvider()

        assert exc_info.value.code == "ANTHROPIC_KEY_MISSING"

    def test_client_lazy_init(self, provider):
        assert provider._client is None


# =============================================================================
# complete 테스트
# =============================================================================


class TestComplete:
    """complete() 테스트."""

    @pytest.mark.asyncio
    async def test_passes_system_prompt(self, provider):
        create = AsyncMock(return_value=make_anthropic_response('{"answer":"ok"}'))
        attach_client(provider, create)

        await provider.complete("Best pools?", system="Answer in JSON")

        create.assert_awaited_once_with(
            model="claude-sonnet-4-20250514",
            max_tokens=512,
            messages=[{"role": "user", "content": "Best pools?"}],
            system="Answer in JSON",
        )

    @pytest.mark.asyncio
    async def test_temperature_included_when_set(self):
        provider = ClaudeProvider(api_key="k", temperature=0.2)
        create = AsyncMock(return_value=make_anthropic_response("x"))
        attach_client(provider, create)

        await provider.complete("q")

        assert create.await_args.kwargs["temperature"] == 0.2
        assert "system" not in create.await_args.kwargs

    @pytest.mark.asyncio
    async def test_returns_text_and_metadata(self, provider):
        create = AsyncMock(
            return_value=make_anthropic_response(
                "raw text", model="claude-sonnet-4-20250514", request_id="msg_1"
            )
        )
        attach_client(provider, create)

        result = await provider.complete("q")

        assert result.text == "raw text"
        assert result.provider == "anthropic"
        assert result.model_used == "claude-sonnet-4-20250514"
        assert result.request_id == "msg_1"

    @pytest.mark.asyncio
    async def test_api_error_wrapped(self, provider):
        create = AsyncMock(side_effect=RuntimeError("overloaded"))
        attach_client(provider, create)

        with pytest.raises(CompletionError) as exc_info:
            await provider.complete("q")

        assert exc_info.value.code == "COMPLETION_FAILED"
        assert "overloaded" in exc_info.value.message
        create.assert_awaited_once()
