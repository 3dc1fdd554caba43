"""
Swap Payload Builder (외부 collaborator).

wallet + 자산 쌍 + 수량 → {to, value, payload}.
DEX SDK를 감싼 HTTP 서비스를 호출하고, 출력은 가공 없이 그대로 반환.
"""

import logging
from typing import Any

import httpx

from .base import PayloadBuildError, PayloadBuilder

logger = logging.getLogger(__name__)

REQUIRED_PAYLOAD_KEYS = ("to", "value", "payload")


class HttpPayloadBuilder(PayloadBuilder):
    """
    HTTP payload builder.

    Usage:
        builder = HttpPayloadBuilder(url="http://localhost:4100/swap")
        tx = await builder.build_swap("EQ...", "TON", "USDT", 1.5)
    """

    def __init__(
        self,
        url: str | None,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """
        Args:
            url: builder 엔드포인트 (None이면 사용 시 에러)
            timeout: HTTP 타임아웃 (초)
            transport: httpx transport (테스트용 MockTransport 주입)
        """
        self.url = url
        self.timeout = timeout
        self._transport = transport

    async def build_swap(
        self,
        wallet_address: str,
        from_asset: str,
        to_asset: str,
        amount: float,
    ) -> dict[str, Any]:
        if not self.url:
            raise PayloadBuildError(
                "PAYLOAD_BUILDER_NOT_CONFIGURED",
                "Swap payload builder URL is not configured (payload_builder.url)",
            )

        body = {
            "userWalletAddress": wallet_address,
            "offerAsset": from_asset,
            "askAsset": to_asset,
            "offerAmount": amount,
        }

        try:
            async with httpx.AsyncClient(
                timeout=self.timeout,
                transport=self._transport,
            ) as client:
                response = await client.post(self.url, json=body)
                response.raise_for_status()
                data = response.json()
        except httpx.HTTPError as e:
            logger.error(f"Swap payload builder call failed: {e}")
            raise PayloadBuildError(
                "PAYLOAD_BUILD_FAILED",
                f"Swap payload builder call failed: {e}",
            ) from e
        except ValueError as e:
            raise PayloadBuildError(
                "PAYLOAD_BUILD_FAILED",
                "Swap payload builder returned a non-JSON body",
            ) from e

        if not isinstance(data, dict):
            raise PayloadBuildError(
                "PAYLOAD_BUILD_FAILED",
                "Swap payload builder returned a non-object body",
            )

        missing = [k for k in REQUIRED_PAYLOAD_KEYS if k not in data]
        if missing:
            raise PayloadBuildError(
                "PAYLOAD_BUILD_FAILED",
                f"Swap payload builder response missing {', '.join(missing)}",
            )

        return {k: data[k] for k in REQUIRED_PAYLOAD_KEYS}
