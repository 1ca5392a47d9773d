"""Stored records.

Plain dataclasses, kept apart from the pydantic wire schemas so the store
never depends on request validation.
"""

from dataclasses import dataclass, fields
from datetime import datetime
from typing import Optional


@dataclass
class NewUser:
    username: str
    password: str


@dataclass
class User:
    id: str
    username: str
    password: str


@dataclass
class NewMemeCoin:
    name: str
    symbol: str
    image_url: str
    creator_address: str


@dataclass
class MemeCoin:
    id: str
    name: str
    symbol: str
    image_url: str
    contract_address: Optional[str]
    creator_address: str
    deployment_tx_hash: Optional[str]
    farcaster_post_url: Optional[str]
    created_at: datetime


MEME_COIN_FIELDS = frozenset(f.name for f in fields(MemeCoin))
IMMUTABLE_FIELDS = frozenset({"id", "created_at"})
DEPLOYMENT_FIELDS = ("contract_address", "deployment_tx_hash", "farcaster_post_url")

SYMBOL_PATTERN = r"^[A-Z0-9]+$"
ADDRESS_PATTERN = r"^0x[a-fA-F0-9]{40}$"
