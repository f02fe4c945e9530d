import logging
from functools import lru_cache

from fastapi import Depends, Request

from uwchat_backend.core.config import settings
from uwchat_backend.core.exceptions import AppException, ServiceConfigurationError
from uwchat_backend.services.container import Services, build_services
from uwchat_backend.services.orchestrator import ChatOrchestrator

logger = logging.getLogger(__name__)

UNKNOWN_CLIENT = "unknown"

@lru_cache(maxsize=1)
def _build_services() -> Services:
    return build_services(settings)

def get_services() -> Services:
    # a failed build is not cached, so the next request retries it
    try:
        return _build_services()
    except AppException:
        raise
    except Exception as exc:
        logger.exception("Could not build service container")
        raise ServiceConfigurationError(f"Service setup failed: {exc}") from exc

def get_orchestrator(services: Services = Depends(get_services)) -> ChatOrchestrator:
    return ChatOrchestrator(services)

def get_client_key(request: Request) -> str:
    # unidentified clients all share the "unknown" bucket
    forwarded = request.headers.get("x-forwarded-for") or ""
    first_hop = forwarded.split(",")[0].strip()
    return first_hop or UNKNOWN_CLIENT
