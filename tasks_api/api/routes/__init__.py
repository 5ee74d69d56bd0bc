from __future__ import annotations

from tasks_api.api.routes.generation import router as generation_router
from tasks_api.api.routes.health import router as health_router

__all__ = ["generation_router", "health_router"]
