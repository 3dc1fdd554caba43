"""
Strategy Routes: AI 전략 제안 + 정적 DeFi 데이터.

- POST /strategy → {answer, strategies[]} 또는 {error, raw?}
- GET /defi-data → {protocols: [...]}
"""

import json
import logging
from typing import Any

from fastapi import APIRouter, Request

from src.app.services.advisor import StrategyAdvisor
from src.app.services.normalize import reject_json_constant
from src.domain.constants import DEFI_PROTOCOLS
from src.domain.errors import InvalidRequest

logger = logging.getLogger(__name__)

router = APIRouter()


async def read_json_body(request: Request) -> dict[str, Any]:
    """
    요청 body를 JSON object로 읽기.

    빈 body → {}. JSON이 아니거나 object가 아니면 InvalidRequest.
    """
    raw = await request.body()
    if not raw:
        return {}

    try:
        data = json.loads(raw, parse_constant=reject_json_constant)
    except ValueError as e:
        raise InvalidRequest("Request body must be a JSON object") from e

    if not isinstance(data, dict):
        raise InvalidRequest("Request body must be a JSON object")
    return data


def get_advisor(request: Request) -> StrategyAdvisor:
    """Request에서 StrategyAdvisor 가져오기."""
    return request.app.state.advisor


@router.post("/strategy")
async def suggest_strategy(request: Request) -> dict[str, Any]:
    """질문 → AI 전략 제안."""
    body = await read_json_body(request)
    return await get_advisor(request).suggest(body.get("question"))


@router.get("/defi-data")
async def defi_data() -> dict[str, Any]:
    """정적 DeFi 프로토콜 데이터."""
    return {"protocols": DEFI_PROTOCOLS}
