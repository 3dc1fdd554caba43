"""
Per-wallet 저장소: 실행 이력(history) + 보상(rewards).

규칙:
- wallet 주소가 파티션 키
- append-only: 기록은 변경/삭제하지 않음
- 처음 보는 wallet → 빈 리스트 (에러 아님)
- 동시성 제어 없음: 같은 wallet에 대한 동시 append는 lost update 가능 (허용된 리스크)

파일 백엔드:
- 단일 JSON 문서 {"history": {addr: [...]}, "rewards": {addr: [...]}}
- 원자적 쓰기: temp → fsync → os.replace
- 저장 실패 시 메모리 상태는 이미 반영되어 있을 수 있음 (롤백 없음)
"""

import json
import logging
import os
import tempfile
from abc import ABC, abstractmethod
from copy import deepcopy
from pathlib import Path
from typing import Any

from src.domain.errors import StoreError
from src.domain.schemas import HistoryRecord, RewardRecord

logger = logging.getLogger(__name__)

HISTORY_KEY = "history"
REWARDS_KEY = "rewards"


# =============================================================================
# Store Interface
# =============================================================================


class WalletStore(ABC):
    """
    Per-wallet 저장소 추상 인터페이스.

    request handler는 이 인터페이스만 사용 → 메모리/파일/DB 교체 가능.
    """

    @abstractmethod
    def get_history(self, wallet_address: str) -> list[dict[str, Any]]:
        """wallet의 실행 이력 (호출 순서대로). 없으면 빈 리스트."""
        ...

    @abstractmethod
    def get_rewards(self, wallet_address: str) -> list[dict[str, Any]]:
        """wallet의 보상 목록 (호출 순서대로). 없으면 빈 리스트."""
        ...

    @abstractmethod
    def append_execution(
        self,
        wallet_address: str,
        history: HistoryRecord,
        reward: RewardRecord,
    ) -> None:
        """
        이력 1건 + 보상 1건을 함께 추가하고 저장.

        Raises:
            StoreError: 저장 실패
        """
        ...


class InMemoryWalletStore(WalletStore):
    """프로세스 수명 동안만 유지되는 저장소."""

    def __init__(self) -> None:
        self._history: dict[str, list[dict[str, Any]]] = {}
        self._rewards: dict[str, list[dict[str, Any]]] = {}

    def get_history(self, wallet_address: str) -> list[dict[str, Any]]:
        return list(self._history.get(wallet_address, []))

    def get_rewards(self, wallet_address: str) -> list[dict[str, Any]]:
        return list(self._rewards.get(wallet_address, []))

    def append_execution(
        self,
        wallet_address: str,
        history: HistoryRecord,
        reward: RewardRecord,
    ) -> None:
        self._history.setdefault(wallet_address, []).append(history.to_dict())
        self._rewards.setdefault(wallet_address, []).append(reward.to_dict())


class JsonFileWalletStore(WalletStore):
    """
    단일 JSON 파일 저장소.

    Usage:
        store = JsonFileWalletStore(Path("data/wallets.json"))
        store.append_execution("0xAA", history, reward)
    """

    def __init__(self, path: Path) -> None:
        self.path = path
        self._data: dict[str, dict[str, list[dict[str, Any]]]] | None = None

    @property
    def data(self) -> dict[str, dict[str, list[dict[str, Any]]]]:
        """저장소 문서 (lazy load)."""
        if self._data is None:
            self._data = load_store_json(self.path)
        return self._data

    def get_history(self, wallet_address: str) -> list[dict[str, Any]]:
        return deepcopy(self.data[HISTORY_KEY].get(wallet_address, []))

    def get_rewards(self, wallet_address: str) -> list[dict[str, Any]]:
        return deepcopy(self.data[REWARDS_KEY].get(wallet_address, []))

    def append_execution(
        self,
        wallet_address: str,
        history: HistoryRecord,
        reward: RewardRecord,
    ) -> None:
        data = self.data
        data[HISTORY_KEY].setdefault(wallet_address, []).append(history.to_dict())
        data[REWARDS_KEY].setdefault(wallet_address, []).append(reward.to_dict())

        try:
            atomic_write_json(self.path, data)
        except (OSError, ValueError) as e:
            logger.error(f"Failed to persist wallet store {self.path}: {e}")
            raise StoreError(
                "Failed to persist execution record",
                path=str(self.path),
                details=str(e),
            ) from e


def create_store(config: dict, root: Path) -> WalletStore:
    """
    config 기반 저장소 생성.

    config["store"]:
        backend: "memory" | "file" (기본 memory)
        path: 파일 백엔드 경로 (상대 경로는 root 기준)
    """
    store_config = config.get("store", {}) or {}
    backend = store_config.get("backend", "memory")

    if backend == "memory":
        return InMemoryWalletStore()

    if backend == "file":
        path = Path(store_config.get("path", "data/wallets.json"))
        if not path.is_absolute():
            path = root / path
        logger.info(f"Using file-backed wallet store: {path}")
        return JsonFileWalletStore(path)

    raise ValueError(f"Unknown store backend: {backend!r}")


# =============================================================================
# File Operations
# =============================================================================


def _fsync_dir(dir_path: Path) -> None:
    """os.replace 결과를 디렉토리 엔트리까지 flush (POSIX만)."""
    if os.name != "posix":
        return
    try:
        dir_fd = os.open(dir_path, os.O_RDONLY)
        try:
            os.fsync(dir_fd)
        finally:
            os.close(dir_fd)
    except OSError as e:
        logger.warning(f"Directory fsync failed for {dir_path}: {e}")


def atomic_write_json(path: Path, data: dict) -> None:
    """
    원자적 JSON 쓰기.

    같은 디렉토리의 temp 파일에 쓰고 fsync → os.replace.
    실패 시 temp 파일 삭제, 기존 파일 보존. NaN/Infinity는 ValueError.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, temp_name = tempfile.mkstemp(dir=path.parent, prefix=f"{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, ensure_ascii=False, allow_nan=False)
            f.flush()
            os.fsync(f.fileno())
        os.replace(temp_name, path)
    except Exception:
        Path(temp_name).unlink(missing_ok=True)
        raise

    _fsync_dir(path.parent)


def load_store_json(path: Path) -> dict[str, dict[str, list[dict[str, Any]]]]:
    """
    저장소 문서 로드.

    파일이 없으면 빈 문서. 누락된 최상위 키는 채워서 반환.

    Raises:
        StoreError: JSON 파싱 실패 또는 최상위가 object가 아님
    """
    if not path.exists():
        return {HISTORY_KEY: {}, REWARDS_KEY: {}}

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise StoreError(
            "Wallet store file is corrupt",
            path=str(path),
            details=str(e),
        ) from e

    if not isinstance(data, dict):
        raise StoreError("Wallet store file is corrupt", path=str(path))

    data.setdefault(HISTORY_KEY, {})
    data.setdefault(REWARDS_KEY, {})
    return data
