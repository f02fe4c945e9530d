from fastapi import APIRouter
from uwchat_backend.api.routes import chat, documents, rate_limit

router = APIRouter()
router.include_router(chat.router)
router.include_router(documents.router)
router.include_router(rate_limit.router)
