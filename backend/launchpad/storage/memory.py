import threading
import uuid
from dataclasses import replace
from datetime import datetime, timezone
from typing import Any

from ..models import MemeCoin, NewMemeCoin, NewUser, User
from .base import DuplicateUsername, check_coin_update


class MemStore:
    """Process-local store. Nothing survives a restart.

    Records handed out are copies, so callers can't change stored state
    except through ``update_meme_coin``. Concurrent updates of one coin are
    last-write-wins.
    """

    kind = "memory"

    def __init__(self) -> None:
        self._users: dict[str, User] = {}
        self._meme_coins: dict[str, MemeCoin] = {}
        self._lock = threading.Lock()

    def create_user(self, data: NewUser) -> User:
        user = User(id=str(uuid.uuid4()), username=data.username, password=data.password)
        with self._lock:
            if any(u.username == data.username for u in self._users.values()):
                raise DuplicateUsername(data.username)
            self._users[user.id] = user
        return replace(user)

    def get_user(self, user_id: str) -> User | None:
        with self._lock:
            user = self._users.get(user_id)
        return replace(user) if user else None

    def get_user_by_username(self, username: str) -> User | None:
        with self._lock:
            users = list(self._users.values())
        for user in users:
            if user.username == username:
                return replace(user)
        return None

    def create_meme_coin(self, data: NewMemeCoin) -> MemeCoin:
        coin = MemeCoin(
            id=str(uuid.uuid4()),
            name=data.name,
            symbol=data.symbol,
            image_url=data.image_url,
            contract_address=None,
            creator_address=data.creator_address,
            deployment_tx_hash=None,
            farcaster_post_url=None,
            created_at=datetime.now(timezone.utc),
        )
        with self._lock:
            self._meme_coins[coin.id] = coin
        return replace(coin)

    def get_meme_coin(self, coin_id: str) -> MemeCoin | None:
        with self._lock:
            coin = self._meme_coins.get(coin_id)
        return replace(coin) if coin else None

    def update_meme_coin(self, coin_id: str, **updates: Any) -> MemeCoin | None:
        with self._lock:
            coin = self._meme_coins.get(coin_id)
            if coin is None:
                return None
            check_coin_update(coin, updates)
            updated = replace(coin, **updates)
            self._meme_coins[coin_id] = updated
        return replace(updated)

    def get_meme_coins_by_creator(self, creator_address: str) -> list[MemeCoin]:
        with self._lock:
            coins = list(self._meme_coins.values())
        return [replace(c) for c in coins if c.creator_address == creator_address]
