import os
import sys
import unittest
import uuid
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from launchpad.db import make_pool
from launchpad.models import NewMemeCoin, NewUser
from launchpad.storage import DuplicateUsername, PgStore

TEST_DATABASE_URL = os.getenv("TEST_DATABASE_URL")


@unittest.skipUnless(TEST_DATABASE_URL, "TEST_DATABASE_URL not set")
class TestPgStore(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        cls.pool = make_pool(TEST_DATABASE_URL)
        cls.pool.open()
        cls.store = PgStore(cls.pool)
        cls.store.ensure_schema()

    @classmethod
    def tearDownClass(cls):
        cls.pool.close()

    def setUp(self):
        # fresh creator per test keeps tests independent without truncating
        self.creator = "0x" + uuid.uuid4().hex + "00000000"

    def new_coin(self, name="Boss Coin"):
        return NewMemeCoin(
            name=name,
            symbol="BOSS",
            image_url="https://ipfs.io/ipfs/abc",
            creator_address=self.creator,
        )

    def test_create_get_round_trip(self):
        coin = self.store.create_meme_coin(self.new_coin())
        self.assertIsNone(coin.contract_address)
        self.assertEqual(self.store.get_meme_coin(coin.id), coin)

    def test_update_and_list(self):
        first = self.store.create_meme_coin(self.new_coin("One"))
        second = self.store.create_meme_coin(self.new_coin("Two"))
        updated = self.store.update_meme_coin(first.id, contract_address="0x" + "1" * 40)
        self.assertEqual(updated.contract_address, "0x" + "1" * 40)
        self.assertEqual(updated.created_at, first.created_at)

        coins = self.store.get_meme_coins_by_creator(self.creator)
        self.assertEqual([c.id for c in coins], [first.id, second.id])

    def test_update_rules(self):
        coin = self.store.create_meme_coin(self.new_coin())
        self.assertIsNone(self.store.update_meme_coin(str(uuid.uuid4()), name="x"))
        self.store.update_meme_coin(coin.id, deployment_tx_hash="0x" + "2" * 64)
        with self.assertRaises(ValueError):
            self.store.update_meme_coin(coin.id, deployment_tx_hash=None)
        with self.assertRaises(ValueError):
            self.store.update_meme_coin(coin.id, id="other")

    def test_users(self):
        username = f"user-{uuid.uuid4().hex}"
        user = self.store.create_user(NewUser(username=username, password="hash"))
        self.assertEqual(self.store.get_user(user.id), user)
        self.assertEqual(self.store.get_user_by_username(username), user)
        with self.assertRaises(DuplicateUsername):
            self.store.create_user(NewUser(username=username, password="other"))
