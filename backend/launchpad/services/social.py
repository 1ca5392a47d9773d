import logging

from ..models import MemeCoin

logger = logging.getLogger(__name__)

POST_TEMPLATE = "Just deployed my Boss Meme Coin: {name} (${symbol}) on Base! 🚀"


class SimulatedPoster:
    """Fakes a Farcaster cast by building a Warpcast compose link."""

    def __init__(self, compose_url: str):
        self.compose_url = compose_url

    async def post(self, coin: MemeCoin) -> str:
        # text goes in unencoded, the same link the web client opens
        text = POST_TEMPLATE.format(name=coin.name, symbol=coin.symbol)
        post_url = f"{self.compose_url}?text={text}"
        logger.info("post_created coin_id=%s", coin.id)
        return post_url
