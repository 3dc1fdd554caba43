"""
FastAPI 애플리케이션 진입점.

실행:
- 개발: uv run uvicorn src.app.main:app --reload --port 4000
- 프로덕션: uv run uvicorn src.app.main:app --port 4000
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse

from src.app.providers.base import LLMProvider, PayloadBuilder
from src.app.providers.payload import HttpPayloadBuilder
from src.app.routes import strategy, wallet
from src.app.services.advisor import StrategyAdvisor
from src.app.services.execute import ExecutionService
from src.core.store import WalletStore, create_store
from src.domain.constants import HEALTH_MESSAGE
from src.domain.errors import GatewayError

logger = logging.getLogger(__name__)

PROJECT_ROOT = Path(__file__).parent.parent.parent

# =============================================================================
# Configuration
# =============================================================================


def load_config(config_path: Path | None = None) -> dict:
    """설정 파일 로드."""
    if config_path is None:
        # 프로젝트 루트의 default.yaml
        config_path = PROJECT_ROOT / "default.yaml"

    if not config_path.exists():
        return {}

    with open(config_path, encoding="utf-8") as f:
        data: dict[Any, Any] = yaml.safe_load(f) or {}
        return data


def configure_logging(config: dict) -> None:
    """logging.level 설정 적용."""
    level_name = str((config.get("logging", {}) or {}).get("level", "INFO")).upper()
    logging.basicConfig(
        level=getattr(logging, level_name, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


# =============================================================================
# App Factory
# =============================================================================


def create_app(
    config: dict | None = None,
    *,
    provider: LLMProvider | None = None,
    store: WalletStore | None = None,
    payload_builder: PayloadBuilder | None = None,
) -> FastAPI:
    """
    FastAPI 앱 생성.

    provider / store / payload_builder를 주입하면 config 대신 사용 (테스트용).
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        """
        애플리케이션 생명주기 관리.

        시작 시: 설정 로드, 저장소/서비스 초기화
        """
        app_config = config if config is not None else load_config()
        configure_logging(app_config)

        builder_config = app_config.get("payload_builder", {}) or {}
        wallet_store = store if store is not None else create_store(app_config, PROJECT_ROOT)
        builder = payload_builder if payload_builder is not None else HttpPayloadBuilder(
            url=builder_config.get("url"),
            timeout=builder_config.get("timeout", 30.0),
        )

        app.state.config = app_config
        app.state.store = wallet_store
        app.state.advisor = StrategyAdvisor(app_config, provider=provider)
        app.state.execution_service = ExecutionService(wallet_store, builder)

        logger.info("DeFi strategy gateway started")
        yield

    app = FastAPI(
        title="DeFi Strategy Gateway",
        description="AI DeFi 전략 제안 + 실행 기록 게이트웨이",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(GatewayError)
    async def gateway_error_handler(request: Request, exc: GatewayError) -> JSONResponse:
        """GatewayError → {error, code, ...context}."""
        if exc.status_code >= 500:
            logger.error(f"{request.method} {request.url.path} failed: {exc}")
        else:
            logger.warning(f"{request.method} {request.url.path} rejected: {exc}")
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    @app.get("/health", response_class=PlainTextResponse)
    async def health() -> str:
        """헬스 체크."""
        return HEALTH_MESSAGE

    app.include_router(strategy.router, tags=["Strategy"])
    app.include_router(wallet.router, tags=["Wallet"])

    return app


load_dotenv()
app = create_app()


# =============================================================================
# CLI Entry Point
# =============================================================================

if __name__ == "__main__":
    import uvicorn

    server_config = load_config().get("server", {}) or {}
    uvicorn.run(
        "src.app.main:app",
        host=server_config.get("host", "127.0.0.1"),
        port=int(server_config.get("port", 4000)),
        reload=True,
    )
