"""
Error definitions for the gateway.

규칙:
- 조용한 실패 금지 → GatewayError 하위 클래스로 명시적 실패
- 모든 에러는 동기적으로 HTTP 응답에 포함 (로그만 남기고 삼키지 않음)
- upstream 에러는 재시도 없이 해당 요청에서 종결
"""

from typing import Any


class GatewayError(Exception):
    """
    게이트웨이 요청 처리 실패 시 발생하는 에러.

    status_code는 HTTP 응답 상태로 그대로 사용된다.

    Usage:
        raise InvalidRequest("Missing or invalid strategy", field="strategy")
    """

    code = "GATEWAY_ERROR"
    status_code = 500

    def __init__(self, message: str, **context: Any) -> None:
        self.message = message
        self.context = context
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        ctx_str = ", ".join(f"{k}={v!r}" for k, v in self.context.items())
        if ctx_str:
            return f"[{self.code}] {self.message} ({ctx_str})"
        return f"[{self.code}] {self.message}"

    def to_dict(self) -> dict[str, Any]:
        """HTTP 응답 / 로그 직렬화용."""
        return {
            "error": self.message,
            "code": self.code,
            **self.context,
        }


class MalformedAIResponse(GatewayError):
    """
    AI 응답 파싱 실패 또는 필수 필드 누락.

    raw: 원문 응답 (진단용으로 응답에 포함)
    """

    code = "MALFORMED_AI_RESPONSE"
    status_code = 500

    def __init__(
        self,
        raw: str,
        message: str = "AI response was not valid JSON or missing required fields.",
        **context: Any,
    ) -> None:
        self.raw = raw
        super().__init__(message, raw=raw, **context)


class UpstreamUnavailable(GatewayError):
    """외부 provider 호출 자체가 실패 (재시도 없음)."""

    code = "UPSTREAM_UNAVAILABLE"
    status_code = 502


class InvalidRequest(GatewayError):
    """wallet 주소 / strategy 누락 또는 형식 오류. 상태 변경 전 발생."""

    code = "INVALID_REQUEST"
    status_code = 400


class MissingWallet(GatewayError):
    """조회 엔드포인트에 wallet 주소 없음."""

    code = "MISSING_WALLET"
    status_code = 400

    def __init__(self, message: str = "Missing walletAddress", **context: Any) -> None:
        super().__init__(message, **context)


class StoreError(GatewayError):
    """저장소 읽기/쓰기 실패."""

    code = "STORE_ERROR"
    status_code = 500


# =============================================================================
# Error Codes
# =============================================================================

class ErrorCodes:
    """에러 코드 상수. 응답 JSON의 code 필드와 일치."""

    # === AI ===
    MALFORMED_AI_RESPONSE = MalformedAIResponse.code
    UPSTREAM_UNAVAILABLE = UpstreamUnavailable.code

    # === Request ===
    INVALID_REQUEST = InvalidRequest.code
    MISSING_WALLET = MissingWallet.code

    # === Store ===
    STORE_ERROR = StoreError.code
