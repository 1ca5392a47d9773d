import re
from typing import Any, Protocol

from ..models import (
    ADDRESS_PATTERN,
    DEPLOYMENT_FIELDS,
    IMMUTABLE_FIELDS,
    MEME_COIN_FIELDS,
    SYMBOL_PATTERN,
    MemeCoin,
    NewMemeCoin,
    NewUser,
    User,
)


class DuplicateUsername(ValueError):
    pass


class RecordStore(Protocol):
    """Capability shared by every backing store.

    Lookups return ``None`` for unknown ids; callers decide what that means.
    """

    kind: str

    def create_user(self, data: NewUser) -> User: ...

    def get_user(self, user_id: str) -> User | None: ...

    def get_user_by_username(self, username: str) -> User | None: ...

    def create_meme_coin(self, data: NewMemeCoin) -> MemeCoin: ...

    def get_meme_coin(self, coin_id: str) -> MemeCoin | None: ...

    def update_meme_coin(self, coin_id: str, **updates: Any) -> MemeCoin | None: ...

    def get_meme_coins_by_creator(self, creator_address: str) -> list[MemeCoin]: ...


def check_coin_update(current: MemeCoin, updates: dict[str, Any]) -> None:
    unknown = set(updates) - MEME_COIN_FIELDS
    if unknown:
        raise ValueError(f"unknown meme coin fields: {', '.join(sorted(unknown))}")
    frozen = IMMUTABLE_FIELDS & set(updates)
    if frozen:
        raise ValueError(f"immutable meme coin fields: {', '.join(sorted(frozen))}")
    for name in DEPLOYMENT_FIELDS:
        if name in updates and updates[name] is None and getattr(current, name) is not None:
            raise ValueError(f"{name} is already set and cannot be cleared")
    if "symbol" in updates:
        symbol = updates["symbol"]
        if not isinstance(symbol, str) or len(symbol) > 10 or not re.fullmatch(SYMBOL_PATTERN, symbol):
            raise ValueError("symbol must be 1-10 uppercase letters and numbers")
    if "creator_address" in updates:
        address = updates["creator_address"]
        if not isinstance(address, str) or not re.fullmatch(ADDRESS_PATTERN, address):
            raise ValueError("creator_address must be a 0x-prefixed 40 hex digit address")
