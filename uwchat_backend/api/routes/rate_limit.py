import logging

from fastapi import APIRouter, Depends

from uwchat_backend.api.deps import get_client_key, get_services
from uwchat_backend.core.exceptions import RateLimitStoreError
from uwchat_backend.schemas.chat import RateLimitOut
from uwchat_backend.services.container import Services

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/rate-limit", tags=["rate-limit"])

@router.get("", response_model=RateLimitOut, response_model_exclude_unset=True)
def check_rate_limit(
    client_key: str = Depends(get_client_key),
    services: Services = Depends(get_services),
):
    try:
        remaining = services.rate_limiter.remaining(client_key)
    except RateLimitStoreError:
        logger.warning("Rate limit check failed", exc_info=True)
        return RateLimitOut(success=False, error="Could not check rate limit", remaining=None)

    return RateLimitOut(success=True, remaining=remaining)
