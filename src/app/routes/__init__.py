"""
FastAPI Routes.

strategy: AI 전략 제안 + 정적 데이터
wallet: 실행 + 이력/보상 조회
"""

from . import strategy, wallet

__all__ = ["strategy", "wallet"]
