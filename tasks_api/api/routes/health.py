from __future__ import annotations

from fastapi import APIRouter

from tasks_api.api.routes.generation import get_generation_service

router = APIRouter(tags=["Health"])


@router.get("/health")
def health_check() -> dict:
    """Health check endpoint.

    Reports which providers have a credential configured so misconfiguration
    is visible without calling any provider.
    """

    dispatcher = get_generation_service().dispatcher
    providers = {
        provider.value: dispatcher.client_for(provider).is_configured
        for provider in dispatcher.providers
    }
    return {"status": "ok", "providers": providers}
