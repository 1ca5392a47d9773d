from typing import Optional

from psycopg_pool import ConnectionPool
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    database_url: Optional[str] = None  # unset -> in-memory store

    deploy_delay_seconds: float = 3.0
    max_upload_bytes: int = 10 * 1024 * 1024

    ipfs_gateway_url: str = "https://ipfs.io/ipfs"
    basescan_url: str = "https://basescan.org"
    warpcast_compose_url: str = "https://warpcast.com/~/compose"
    fee_recipient: str = "0x73cf2b2eb72a243602e9dcda9efec6473e5c1741"
    gas_used: str = "0.0001"

    frontend_url: Optional[str] = None
    log_level: str = "INFO"

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


def make_pool(database_url: str) -> ConnectionPool:
    return ConnectionPool(
        conninfo=database_url,
        min_size=1,
        max_size=5,
        open=False,
    )
