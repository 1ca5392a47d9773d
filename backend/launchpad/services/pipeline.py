"""Deployment pipeline for a stored meme coin.

A coin moves ``created -> contract_assigned -> posted``. The stage is read
off the record itself, and every step is skipped once its fields are set, so
``run`` can be repeated on the same id to finish a half-deployed coin.
Runs on one id are serialised, so each step happens at most once.
Nothing is rolled back when a step fails.
"""

import asyncio
import logging

from fastapi.concurrency import run_in_threadpool

from ..models import MemeCoin
from ..storage import RecordStore
from .chain import SimulatedDeployer
from .social import SimulatedPoster

logger = logging.getLogger(__name__)

CREATED = "created"
CONTRACT_ASSIGNED = "contract_assigned"
POSTED = "posted"


class CoinNotFound(LookupError):
    pass


def deployment_stage(coin: MemeCoin) -> str:
    if coin.contract_address is None:
        return CREATED
    if coin.farcaster_post_url is None:
        return CONTRACT_ASSIGNED
    return POSTED


class DeploymentPipeline:
    def __init__(self, store: RecordStore, deployer: SimulatedDeployer, poster: SimulatedPoster):
        self.store = store
        self.deployer = deployer
        self.poster = poster
        # coin id -> [lock, number of runs holding or waiting on it]
        self._locks: dict[str, list] = {}

    async def run(self, coin_id: str) -> MemeCoin:
        entry = self._locks.setdefault(coin_id, [asyncio.Lock(), 0])
        entry[1] += 1
        try:
            async with entry[0]:
                return await self._run(coin_id)
        finally:
            entry[1] -= 1
            if entry[1] == 0:
                del self._locks[coin_id]

    async def _run(self, coin_id: str) -> MemeCoin:
        coin = await run_in_threadpool(self.store.get_meme_coin, coin_id)
        if coin is None:
            raise CoinNotFound(coin_id)

        if deployment_stage(coin) == CREATED:
            deployment = await self.deployer.deploy(coin)
            coin = await self._update(
                coin_id,
                contract_address=deployment.contract_address,
                deployment_tx_hash=deployment.tx_hash,
            )
            logger.info(
                "contract_assigned coin_id=%s contract_address=%s",
                coin_id,
                coin.contract_address,
            )

        if deployment_stage(coin) == CONTRACT_ASSIGNED:
            post_url = await self.poster.post(coin)
            coin = await self._update(coin_id, farcaster_post_url=post_url)
            logger.info("posted coin_id=%s", coin_id)

        return coin

    async def _update(self, coin_id: str, **updates) -> MemeCoin:
        coin = await run_in_threadpool(self.store.update_meme_coin, coin_id, **updates)
        if coin is None:
            raise CoinNotFound(coin_id)
        return coin
