import logging

from fastapi import APIRouter, Depends, HTTPException
from fastapi.concurrency import run_in_threadpool

from ..db import Settings
from ..deps import get_pipeline, get_settings, get_store
from ..models import MemeCoin
from ..schemas.coins import DeployOut, DeployRequest, MemeCoinOut
from ..services import CoinNotFound, DeploymentPipeline
from ..storage import RecordStore

router = APIRouter(prefix="/api/deploy", tags=["deploy"])
logger = logging.getLogger(__name__)


def _deploy_out(coin: MemeCoin, settings: Settings) -> DeployOut:
    return DeployOut(
        meme_coin=MemeCoinOut.model_validate(coin),
        contract_address=coin.contract_address,
        deployment_tx_hash=coin.deployment_tx_hash,
        basescan_url=f"{settings.basescan_url.rstrip('/')}/address/{coin.contract_address}",
        gas_used=settings.gas_used,
        fee_recipient=settings.fee_recipient,
    )


def _deploy_failed(e: Exception) -> HTTPException:
    return HTTPException(
        status_code=500,
        detail={"message": "Failed to deploy meme coin", "error": str(e)},
    )


@router.post("", response_model=DeployOut)
async def deploy_meme_coin(
    payload: DeployRequest,
    store: RecordStore = Depends(get_store),
    pipeline: DeploymentPipeline = Depends(get_pipeline),
    settings: Settings = Depends(get_settings),
):
    """Create the coin record, then run the (simulated) deploy and post.

    Not idempotent: every call creates a new record. A failure part way
    leaves the record as it is; use the resume endpoint to finish it.
    """
    try:
        coin = await run_in_threadpool(store.create_meme_coin, payload.to_new_coin())
        logger.info("coin_created coin_id=%s creator=%s", coin.id, coin.creator_address)
        coin = await pipeline.run(coin.id)
    except Exception as e:
        logger.exception("deploy_failed name=%s symbol=%s", payload.name, payload.symbol)
        raise _deploy_failed(e)

    return _deploy_out(coin, settings)


@router.post("/{coin_id}/resume", response_model=DeployOut)
async def resume_deployment(
    coin_id: str,
    pipeline: DeploymentPipeline = Depends(get_pipeline),
    settings: Settings = Depends(get_settings),
):
    try:
        coin = await pipeline.run(coin_id)
    except CoinNotFound:
        raise HTTPException(status_code=404, detail="Meme coin not found")
    except Exception as e:
        logger.exception("resume_failed coin_id=%s", coin_id)
        raise _deploy_failed(e)

    return _deploy_out(coin, settings)
