import logging
import uuid
from typing import BinaryIO

logger = logging.getLogger(__name__)


class SyntheticContentStore:
    """Stand-in for IPFS pinning.

    Hands back a gateway URL built around a fresh random id. The bytes are
    never read or kept.
    """

    def __init__(self, gateway_url: str):
        self.gateway_url = gateway_url.rstrip("/")

    async def put(self, fileobj: BinaryIO, file_name: str | None, content_type: str | None) -> str:
        image_url = f"{self.gateway_url}/{uuid.uuid4()}"
        logger.info("content_stored file_name=%s content_type=%s url=%s", file_name, content_type, image_url)
        return image_url
