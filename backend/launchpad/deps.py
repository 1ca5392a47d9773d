from fastapi import Request

from .db import Settings
from .services import DeploymentPipeline, SyntheticContentStore
from .storage import RecordStore


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_store(request: Request) -> RecordStore:
    return request.app.state.store


def get_pipeline(request: Request) -> DeploymentPipeline:
    return request.app.state.pipeline


def get_content_store(request: Request) -> SyntheticContentStore:
    return request.app.state.content_store
