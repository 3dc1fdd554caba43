"""
App layer: API 게이트웨이 (FastAPI).

역할:
- AI provider 호출 + 응답 정규화
- 전략 실행 기록 / 조회 엔드포인트
- ⚠️ 저장 로직 없음 (core.store에 위임)
"""
