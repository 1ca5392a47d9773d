import uuid
from typing import Any

from psycopg import errors
from psycopg_pool import ConnectionPool

from ..models import MemeCoin, NewMemeCoin, NewUser, User
from .base import DuplicateUsername, check_coin_update

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS users (
  id varchar PRIMARY KEY,
  username text NOT NULL UNIQUE,
  password text NOT NULL
);

CREATE TABLE IF NOT EXISTS meme_coins (
  seq bigserial UNIQUE,
  id varchar PRIMARY KEY,
  name text NOT NULL,
  symbol text NOT NULL,
  image_url text NOT NULL,
  contract_address text,
  creator_address text NOT NULL,
  deployment_tx_hash text,
  farcaster_post_url text,
  created_at timestamptz NOT NULL DEFAULT now()
);

CREATE INDEX IF NOT EXISTS meme_coins_creator_idx ON meme_coins (creator_address, seq);
"""

# Column order matches the MemeCoin dataclass.
COIN_COLUMNS = (
    "id, name, symbol, image_url, contract_address, creator_address, "
    "deployment_tx_hash, farcaster_post_url, created_at"
)


def _coin(row) -> MemeCoin | None:
    return MemeCoin(*row) if row else None


def _user(row) -> User | None:
    return User(*row) if row else None


class PgStore:
    """Same contract as MemStore, backed by PostgreSQL."""

    kind = "postgres"

    def __init__(self, pool: ConnectionPool) -> None:
        self.pool = pool

    def ensure_schema(self) -> None:
        with self.pool.connection() as conn:
            with conn.cursor() as cur:
                cur.execute(SCHEMA_SQL)
            conn.commit()

    def create_user(self, data: NewUser) -> User:
        with self.pool.connection() as conn:
            with conn.cursor() as cur:
                try:
                    cur.execute(
                        """
                        INSERT INTO users (id, username, password)
                        VALUES (%s, %s, %s)
                        RETURNING id, username, password;
                        """,
                        (str(uuid.uuid4()), data.username, data.password),
                    )
                    row = cur.fetchone()
                    conn.commit()
                except errors.UniqueViolation:
                    conn.rollback()
                    raise DuplicateUsername(data.username)
        return _user(row)

    def get_user(self, user_id: str) -> User | None:
        with self.pool.connection() as conn:
            with conn.cursor() as cur:
                cur.execute("SELECT id, username, password FROM users WHERE id = %s;", (user_id,))
                return _user(cur.fetchone())

    def get_user_by_username(self, username: str) -> User | None:
        with self.pool.connection() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    "SELECT id, username, password FROM users WHERE username = %s LIMIT 1;",
                    (username,),
                )
                return _user(cur.fetchone())

    def create_meme_coin(self, data: NewMemeCoin) -> MemeCoin:
        with self.pool.connection() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    f"""
                    INSERT INTO meme_coins (id, name, symbol, image_url, creator_address)
                    VALUES (%s, %s, %s, %s, %s)
                    RETURNING {COIN_COLUMNS};
                    """,
                    (str(uuid.uuid4()), data.name, data.symbol, data.image_url, data.creator_address),
                )
                row = cur.fetchone()
                conn.commit()
        return _coin(row)

    def get_meme_coin(self, coin_id: str) -> MemeCoin | None:
        with self.pool.connection() as conn:
            with conn.cursor() as cur:
                cur.execute(f"SELECT {COIN_COLUMNS} FROM meme_coins WHERE id = %s;", (coin_id,))
                return _coin(cur.fetchone())

    def update_meme_coin(self, coin_id: str, **updates: Any) -> MemeCoin | None:
        with self.pool.connection() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    f"SELECT {COIN_COLUMNS} FROM meme_coins WHERE id = %s FOR UPDATE;",
                    (coin_id,),
                )
                current = _coin(cur.fetchone())
                if current is None:
                    conn.rollback()
                    return None
                try:
                    check_coin_update(current, updates)
                except ValueError:
                    conn.rollback()
                    raise
                if not updates:
                    conn.commit()
                    return current

                # column names are checked against the MemeCoin fields above
                assignments = ", ".join(f"{name} = %s" for name in updates)
                params = list(updates.values())
                params.append(coin_id)
                cur.execute(
                    f"UPDATE meme_coins SET {assignments} WHERE id = %s RETURNING {COIN_COLUMNS};",
                    tuple(params),
                )
                row = cur.fetchone()
                conn.commit()
        return _coin(row)

    def get_meme_coins_by_creator(self, creator_address: str) -> list[MemeCoin]:
        with self.pool.connection() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    f"SELECT {COIN_COLUMNS} FROM meme_coins WHERE creator_address = %s ORDER BY seq;",
                    (creator_address,),
                )
                rows = cur.fetchall()
        return [MemeCoin(*r) for r in rows]
