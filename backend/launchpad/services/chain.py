import asyncio
import logging
import secrets
from dataclasses import dataclass

from ..models import MemeCoin

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Deployment:
    contract_address: str
    tx_hash: str


def _random_hex(n_bytes: int) -> str:
    return "0x" + secrets.token_hex(n_bytes)


class SimulatedDeployer:
    """Fakes a token contract deployment on Base.

    Addresses and hashes are random; ``confirmation_delay`` stands in for
    waiting on the transaction receipt.
    """

    def __init__(self, confirmation_delay: float = 3.0):
        self.confirmation_delay = confirmation_delay

    async def deploy(self, coin: MemeCoin) -> Deployment:
        deployment = Deployment(contract_address=_random_hex(20), tx_hash=_random_hex(32))
        logger.info(
            "deploy_submitted coin_id=%s symbol=%s tx_hash=%s",
            coin.id,
            coin.symbol,
            deployment.tx_hash,
        )
        if self.confirmation_delay > 0:
            await asyncio.sleep(self.confirmation_delay)
        return deployment
