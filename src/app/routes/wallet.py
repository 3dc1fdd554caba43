"""
Wallet Routes: 전략 실행 + per-wallet 기록 조회.

- POST /execute-strategy → status + payload
- GET /history → {walletAddress, history[]}
- GET /rewards → {walletAddress, rewards[]}
- POST /sbt → stub

wallet 주소: x-wallet-address 헤더 우선, 없으면 walletAddress (query/body).
"""

import logging
from typing import Any

from fastapi import APIRouter, Header, Query, Request

from src.app.routes.strategy import read_json_body
from src.app.services.execute import ExecutionService
from src.core.store import WalletStore
from src.domain.constants import SBT_STUB_STATUS, WALLET_FIELD, WALLET_HEADER
from src.domain.errors import MissingWallet

logger = logging.getLogger(__name__)

router = APIRouter()


def get_store(request: Request) -> WalletStore:
    """Request에서 WalletStore 가져오기."""
    return request.app.state.store


def get_execution_service(request: Request) -> ExecutionService:
    """Request에서 ExecutionService 가져오기."""
    return request.app.state.execution_service


async def resolve_wallet_address(
    request: Request,
    header_wallet: str | None = None,
    query_wallet: str | None = None,
) -> str:
    """
    요청에서 wallet 주소 추출.

    순서: 헤더 → query → body. 모두 없으면 MissingWallet.
    """
    wallet = header_wallet or query_wallet
    if not wallet:
        body = await read_json_body(request)
        candidate = body.get(WALLET_FIELD)
        wallet = candidate if isinstance(candidate, str) else None

    if not wallet:
        raise MissingWallet()
    return wallet


@router.post("/execute-strategy")
async def execute_strategy(request: Request) -> dict[str, Any]:
    """전략 실행."""
    body = await read_json_body(request)
    receipt = await get_execution_service(request).execute(
        strategy=body.get("strategy"),
        wallet_address=body.get(WALLET_FIELD),
        recipient=body.get("recipient"),
        amount=body.get("amount"),
    )
    return receipt.to_dict()


@router.get("/history")
async def get_history(
    request: Request,
    header_wallet: str | None = Header(default=None, alias=WALLET_HEADER),
    query_wallet: str | None = Query(default=None, alias=WALLET_FIELD),
) -> dict[str, Any]:
    """wallet 실행 이력."""
    wallet = await resolve_wallet_address(request, header_wallet, query_wallet)
    return {
        "walletAddress": wallet,
        "history": get_store(request).get_history(wallet),
    }


@router.get("/rewards")
async def get_rewards(
    request: Request,
    header_wallet: str | None = Header(default=None, alias=WALLET_HEADER),
    query_wallet: str | None = Query(default=None, alias=WALLET_FIELD),
) -> dict[str, Any]:
    """wallet 보상 목록."""
    wallet = await resolve_wallet_address(request, header_wallet, query_wallet)
    return {
        "walletAddress": wallet,
        "rewards": get_store(request).get_rewards(wallet),
    }


@router.post("/sbt")
async def mint_sbt() -> dict[str, str]:
    """SBT 발행 (stub)."""
    return {"status": SBT_STUB_STATUS}
