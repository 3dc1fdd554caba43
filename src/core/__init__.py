"""
Core layer: per-wallet 상태 저장.

역할:
- history / rewards 저장소 인터페이스와 구현 (memory, JSON file)
- 원자적 JSON 쓰기
"""

from .store import (
    InMemoryWalletStore,
    JsonFileWalletStore,
    WalletStore,
    atomic_write_json,
    create_store,
    load_store_json,
)

__all__ = [
    "WalletStore",
    "InMemoryWalletStore",
    "JsonFileWalletStore",
    "create_store",
    "atomic_write_json",
    "load_store_json",
]
