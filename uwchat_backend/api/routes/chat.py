from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from uwchat_backend.api.deps import UNKNOWN_CLIENT, get_client_key, get_orchestrator
from uwchat_backend.schemas.chat import ChatRequest, ChatResponse
from uwchat_backend.services.orchestrator import ChatOrchestrator

router = APIRouter(prefix="/chat", tags=["chat"])

@router.post("", response_model=ChatResponse)
def chat(
    payload: ChatRequest,
    client_key: str = Depends(get_client_key),
    orchestrator: ChatOrchestrator = Depends(get_orchestrator),
):
    remote_ip = None if client_key == UNKNOWN_CLIENT else client_key
    outcome = orchestrator.handle(payload, client_key, remote_ip=remote_ip)
    return JSONResponse(status_code=outcome.status_code, content=outcome.body.to_json())
