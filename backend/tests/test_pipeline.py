import asyncio
import re
import sys
import time
import unittest
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from launchpad.models import NewMemeCoin
from launchpad.services import (
    CoinNotFound,
    DeploymentPipeline,
    SimulatedDeployer,
    SimulatedPoster,
    SyntheticContentStore,
    deployment_stage,
)
from launchpad.storage import MemStore

CREATOR = "0x742d35Cc6634C0532925a3b844Bc454e4438f44e"
COMPOSE_URL = "https://warpcast.com/~/compose"


class CountingDeployer(SimulatedDeployer):
    def __init__(self, delay=0.0):
        super().__init__(delay)
        self.calls = 0

    async def deploy(self, coin):
        self.calls += 1
        return await super().deploy(coin)


class TestDeploymentPipeline(unittest.IsolatedAsyncioTestCase):
    async def asyncSetUp(self):
        self.store = MemStore()
        self.deployer = CountingDeployer()
        self.pipeline = DeploymentPipeline(self.store, self.deployer, SimulatedPoster(COMPOSE_URL))
        self.coin = self.store.create_meme_coin(
            NewMemeCoin(
                name="Boss Coin",
                symbol="BOSS",
                image_url="https://ipfs.io/ipfs/abc",
                creator_address=CREATOR,
            )
        )

    async def test_run_completes_all_stages(self):
        self.assertEqual(deployment_stage(self.coin), "created")
        coin = await self.pipeline.run(self.coin.id)
        self.assertEqual(deployment_stage(coin), "posted")
        self.assertRegex(coin.contract_address, r"^0x[0-9a-f]{40}$")
        self.assertRegex(coin.deployment_tx_hash, r"^0x[0-9a-f]{64}$")
        self.assertIn("Boss Coin", coin.farcaster_post_url)
        self.assertIn("$BOSS", coin.farcaster_post_url)
        self.assertEqual(self.store.get_meme_coin(coin.id), coin)

    async def test_run_is_idempotent(self):
        first = await self.pipeline.run(self.coin.id)
        second = await self.pipeline.run(self.coin.id)
        self.assertEqual(first, second)
        self.assertEqual(self.deployer.calls, 1)

    async def test_resumes_after_contract_assigned(self):
        self.store.update_meme_coin(
            self.coin.id,
            contract_address="0x" + "b" * 40,
            deployment_tx_hash="0x" + "c" * 64,
        )
        coin = await self.pipeline.run(self.coin.id)
        self.assertEqual(self.deployer.calls, 0)
        self.assertEqual(coin.contract_address, "0x" + "b" * 40)
        self.assertIsNotNone(coin.farcaster_post_url)

    async def test_concurrent_runs_deploy_once(self):
        deployer = CountingDeployer(0.05)
        pipeline = DeploymentPipeline(self.store, deployer, SimulatedPoster(COMPOSE_URL))
        first, second = await asyncio.gather(pipeline.run(self.coin.id), pipeline.run(self.coin.id))
        self.assertEqual(deployer.calls, 1)
        self.assertEqual(first.contract_address, second.contract_address)
        self.assertEqual(first.deployment_tx_hash, second.deployment_tx_hash)
        self.assertEqual(self.store.get_meme_coin(self.coin.id), second)
        self.assertEqual(pipeline._locks, {})

    async def test_unknown_coin(self):
        with self.assertRaises(CoinNotFound):
            await self.pipeline.run("missing")

    async def test_delay_does_not_serialise_deploys(self):
        pipeline = DeploymentPipeline(self.store, SimulatedDeployer(0.2), SimulatedPoster(COMPOSE_URL))
        other = self.store.create_meme_coin(
            NewMemeCoin(name="Other", symbol="OTH", image_url="https://x.io/y", creator_address=CREATOR)
        )
        start = time.monotonic()
        await asyncio.gather(pipeline.run(self.coin.id), pipeline.run(other.id))
        self.assertLess(time.monotonic() - start, 0.35)


class TestCollaborators(unittest.IsolatedAsyncioTestCase):
    async def test_content_store_url(self):
        store = SyntheticContentStore("https://ipfs.io/ipfs/")
        url = await store.put(None, "boss.png", "image/png")
        self.assertRegex(url, r"^https://ipfs\.io/ipfs/[0-9a-f-]{36}$")
        self.assertNotEqual(url, await store.put(None, "boss.png", "image/png"))

    async def test_poster_text(self):
        poster = SimulatedPoster(COMPOSE_URL)
        pipeline_coin = MemStore().create_meme_coin(
            NewMemeCoin(name="Boss Coin", symbol="BOSS", image_url="https://x.io/y", creator_address=CREATOR)
        )
        url = await poster.post(pipeline_coin)
        self.assertTrue(url.startswith(COMPOSE_URL + "?text="))
        self.assertTrue(re.search(r"Boss Meme Coin: Boss Coin \(\$BOSS\) on Base!", url))
