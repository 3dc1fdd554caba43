"""
Domain Constants: 게이트웨이 전역 상수.

헤더명, 보상 정책, 정적 프로토콜 데이터 등 시스템 전반에서 사용되는 값들.
"""

# =============================================================================
# Request
# =============================================================================

WALLET_HEADER = "x-wallet-address"
WALLET_FIELD = "walletAddress"

# =============================================================================
# Health / Stub Responses
# =============================================================================

HEALTH_MESSAGE = "DeFi strategy gateway running"
SBT_STUB_STATUS = "SBT minted (stub)"

# =============================================================================
# Execution Policy
# =============================================================================
# strategy.type 태그 → StrategyKind
# 태그 없음 = 시뮬레이션 (이력 + 보상 기록)

STRATEGY_TYPE_SWAP = "swap"
STRATEGY_TYPE_TRANSFER = "transfer"

SIMULATED_STATUS = "Strategy execution simulated"
SWAP_STATUS = "Swap payload built"
TRANSFER_STATUS = "Transfer payload built"
MOCK_TX_PAYLOAD = "MOCK_TX_BASE64=="

DEFAULT_SWAP_FROM = "TON"
DEFAULT_SWAP_TO = "USDT"

# 1 TON = 10^9 nanoton
NANOTON_PER_TON = 1_000_000_000

# 온체인 금액 상한 (uint128 nanoton), 하한은 1 nanoton
MAX_NANOTON = 2**128 - 1
MIN_AMOUNT_EXPONENT = -9

# =============================================================================
# Rewards
# =============================================================================

REWARD_TYPE_STAR = "star"
REWARD_DETAIL_PREFIX = "Executed: "

# =============================================================================
# Static DeFi Reference Data (GET /defi-data)
# =============================================================================

DEFI_PROTOCOLS = [
    {
        "name": "STON.fi",
        "apy": "7.2%",
        "tvl": "12M",
        "pools": 8,
        "url": "https://ston.fi",
    },
    {
        "name": "DeDust",
        "apy": "5.8%",
        "tvl": "8.5M",
        "pools": 5,
        "url": "https://dedust.io",
    },
    {
        "name": "Tonstakers",
        "apy": "4.1%",
        "tvl": "3.2M",
        "pools": 1,
        "url": "https://tonstakers.com",
    },
]

# =============================================================================
# AI Prompt
# =============================================================================

STRATEGY_SYSTEM_PROMPT = (
    "You are an expert DeFi strategist for the TON blockchain. "
    "ALWAYS respond ONLY with a valid JSON object with this structure: "
    '{ "answer": "summary of your advice", "strategies": '
    '[ { "title": "...", "description": "...", "apy": "...", "tvl": "..." } ] } '
    "Do not include any markdown, explanation, or text outside the JSON. "
    "Do not use triple backticks. Only output valid JSON."
)
