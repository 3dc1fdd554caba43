"""
Response Normalizer: AI 원문 → 검증된 AIResponse dict.

규칙:
- 앞뒤 공백 제거 → 코드 펜스(```json ... ```) 제거 → JSON 파싱
- answer: 비어있지 않은 문자열, strategies: 리스트 (빈 리스트 허용)
- 성공 시 파싱된 객체를 그대로 반환 (필드 추가/삭제 없음)
- 실패 시 MalformedAIResponse (원문 raw 포함), 재시도 없음
"""

import json
import logging
import re
from typing import Any

from src.domain.errors import MalformedAIResponse

logger = logging.getLogger(__name__)

FENCE = "```"

# 여는 펜스 + 선택적 언어 태그 (```json, ```JSON, ```js 등)
_OPENING_FENCE = re.compile(r"^```[A-Za-z0-9_+-]*")
_CLOSING_FENCE = re.compile(r"```$")


def reject_json_constant(token: str) -> Any:
    """
    json.loads parse_constant 훅.

    NaN, Infinity, -Infinity는 JSON이 아니므로 거부.
    """
    raise ValueError(f"Non-standard JSON constant: {token}")


def strip_code_fence(text: str) -> str:
    """
    코드 펜스 제거.

    펜스로 시작하지 않으면 trim만 수행.
    """
    text = text.strip()
    if not text.startswith(FENCE):
        return text

    text = _OPENING_FENCE.sub("", text, count=1)
    text = _CLOSING_FENCE.sub("", text.rstrip(), count=1)
    return text.strip()


def normalize_ai_response(raw: str) -> dict[str, Any]:
    """
    AI 원문을 검증된 응답 구조로 변환.

    Args:
        raw: provider가 반환한 원문 텍스트

    Returns:
        {"answer": str, "strategies": list, ...} (파싱 결과 그대로)

    Raises:
        MalformedAIResponse: 파싱 실패 / answer 누락 / strategies가 리스트가 아님
    """
    body = strip_code_fence(raw)

    try:
        data = json.loads(body, parse_constant=reject_json_constant)
    except ValueError as e:
        logger.error(f"Failed to parse AI response as JSON: {e}")
        raise MalformedAIResponse(raw) from e

    if not isinstance(data, dict):
        logger.error("AI response is not a JSON object")
        raise MalformedAIResponse(raw)

    answer = data.get("answer")
    if not isinstance(answer, str) or not answer:
        logger.error("AI response missing required field: answer")
        raise MalformedAIResponse(raw)

    if not isinstance(data.get("strategies"), list):
        logger.error("AI response missing required field: strategies")
        raise MalformedAIResponse(raw)

    return data
