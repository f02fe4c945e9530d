import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from uwchat_backend.api.deps import get_services
from uwchat_backend.schemas.documents import EmbedIn, EmbedOut
from uwchat_backend.services.container import Services
from uwchat_backend.services.Ingestion.pipeline import ingest_document

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/embed", tags=["documents"])

@router.post("", response_model=EmbedOut, response_model_exclude_none=True)
def embed_document(payload: EmbedIn, services: Services = Depends(get_services)):
    try:
        report = ingest_document(
            payload.content,
            payload.file_name,
            embedder=services.embedder,
            store=services.vector_store,
        )
    except Exception as exc:
        logger.exception("Embedding document failed", extra={"file_name": payload.file_name})
        return JSONResponse(
            status_code=500,
            content=EmbedOut(success=False, error=str(exc) or type(exc).__name__).model_dump(exclude_none=True),
        )

    return EmbedOut(
        success=True,
        message=f"Successfully processed {report.stored} chunks from {payload.file_name}",
    )
