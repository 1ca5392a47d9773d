import logging

from fastapi import APIRouter, Depends, HTTPException

from ..deps import get_store
from ..schemas.coins import CoinsOut, MemeCoinDetailOut, MemeCoinOut
from ..services import deployment_stage
from ..storage import RecordStore

router = APIRouter(prefix="/api", tags=["coins"])
logger = logging.getLogger(__name__)


@router.get("/coins/{address}", response_model=CoinsOut)
def list_coins_by_creator(address: str, store: RecordStore = Depends(get_store)):
    """All coins of one creator, oldest first. The address is matched as given."""
    try:
        coins = store.get_meme_coins_by_creator(address)
    except Exception as e:
        logger.exception("list_coins_failed address=%s", address)
        raise HTTPException(
            status_code=500,
            detail={"message": "Failed to fetch meme coins", "error": str(e)},
        )

    return CoinsOut(coins=[MemeCoinOut.model_validate(c) for c in coins])


@router.get("/memecoins/{coin_id}", response_model=MemeCoinDetailOut)
def get_meme_coin(coin_id: str, store: RecordStore = Depends(get_store)):
    coin = store.get_meme_coin(coin_id)
    if coin is None:
        raise HTTPException(status_code=404, detail="Meme coin not found")
    return MemeCoinDetailOut(meme_coin=MemeCoinOut.model_validate(coin), stage=deployment_stage(coin))
