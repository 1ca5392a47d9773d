import re
from datetime import datetime
from typing import List, Optional

from pydantic import AnyUrl, BaseModel, ConfigDict, TypeAdapter, ValidationError, field_validator
from pydantic.alias_generators import to_camel

from ..models import ADDRESS_PATTERN, SYMBOL_PATTERN, NewMemeCoin

_url = TypeAdapter(AnyUrl)


class WireModel(BaseModel):
    # camelCase on the wire, snake_case in Python
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class DeployRequest(WireModel):
    name: str
    symbol: str
    image_url: str
    creator_address: str

    @field_validator("name")
    @classmethod
    def name_length(cls, value: str) -> str:
        if not value:
            raise ValueError("Token name is required")
        if len(value) > 50:
            raise ValueError("Token name too long")
        return value

    @field_validator("symbol")
    @classmethod
    def symbol_format(cls, value: str) -> str:
        if not value:
            raise ValueError("Token symbol is required")
        if len(value) > 10:
            raise ValueError("Symbol too long")
        if not re.fullmatch(SYMBOL_PATTERN, value):
            raise ValueError("Symbol must be uppercase letters and numbers only")
        return value

    @field_validator("image_url")
    @classmethod
    def image_url_must_parse(cls, value: str) -> str:
        try:
            _url.validate_python(value)
        except ValidationError:
            raise ValueError("Valid image URL is required")
        # keep the caller's spelling, AnyUrl would normalise it
        return value

    @field_validator("creator_address")
    @classmethod
    def creator_address_format(cls, value: str) -> str:
        if not re.fullmatch(ADDRESS_PATTERN, value):
            raise ValueError("Valid Ethereum address required")
        return value

    def to_new_coin(self) -> NewMemeCoin:
        return NewMemeCoin(
            name=self.name,
            symbol=self.symbol,
            image_url=self.image_url,
            creator_address=self.creator_address,
        )


class MemeCoinOut(WireModel):
    id: str
    name: str
    symbol: str
    image_url: str
    contract_address: Optional[str] = None
    creator_address: str
    deployment_tx_hash: Optional[str] = None
    farcaster_post_url: Optional[str] = None
    created_at: datetime


class DeployOut(WireModel):
    success: bool = True
    meme_coin: MemeCoinOut
    contract_address: str
    deployment_tx_hash: str
    basescan_url: str
    gas_used: str
    fee_recipient: str


class CoinsOut(WireModel):
    coins: List[MemeCoinOut]


class MemeCoinDetailOut(WireModel):
    meme_coin: MemeCoinOut
    stage: str
