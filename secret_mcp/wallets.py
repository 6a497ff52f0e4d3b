"""In-memory bookkeeping of wallets connected from the web UI (per-process)."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from threading import Lock
from typing import Any, Dict, Optional

DEFAULT_WALLET_NAME = "Keplr Wallet"


@dataclass(slots=True)
class WalletConnection:
    address: str
    name: str
    is_hardware_wallet: bool
    connected_at: str

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        return {
            "address": data["address"],
            "name": data["name"],
            "isHardwareWallet": data["is_hardware_wallet"],
            "connectedAt": data["connected_at"],
        }


class WalletRegistry:
    def __init__(self) -> None:
        self._lock = Lock()
        self._wallets: Dict[str, WalletConnection] = {}

    def connect(
        self, address: str, *, name: Optional[str] = None, is_hardware_wallet: bool = False
    ) -> WalletConnection:
        connection = WalletConnection(
            address=address,
            name=name or DEFAULT_WALLET_NAME,
            is_hardware_wallet=bool(is_hardware_wallet),
            connected_at=datetime.now(timezone.utc).isoformat(),
        )
        with self._lock:
            self._wallets[address] = connection
        return connection

    def get(self, address: str) -> Optional[WalletConnection]:
        with self._lock:
            return self._wallets.get(address)

    def disconnect(self, address: str) -> bool:
        with self._lock:
            return self._wallets.pop(address, None) is not None

    def count(self) -> int:
        with self._lock:
            return len(self._wallets)

    def reset(self) -> None:
        with self._lock:
            self._wallets.clear()


default_wallets = WalletRegistry()
