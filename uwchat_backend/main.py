from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from uwchat_backend.api import router as api_router
from uwchat_backend.core.config import settings
from uwchat_backend.core.exceptions import AppException
from uwchat_backend.core.logging import setup_logging
from uwchat_backend.services.orchestrator import ERROR_MESSAGE

setup_logging(settings.LOG_LEVEL)

app = FastAPI(title=settings.APP_NAME)

app.include_router(api_router, prefix=settings.API_PREFIX)

@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=400,
        content={
            "success": False,
            "error": "Invalid request body",
            "detail": jsonable_encoder(
                [{"loc": e["loc"], "msg": e["msg"], "type": e["type"]} for e in exc.errors()]
            ),
        },
    )

@app.exception_handler(AppException)
async def app_exception_handler(request: Request, exc: AppException):
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "success": False,
            "message": {"role": "assistant", "content": ERROR_MESSAGE},
            "error": exc.message,
        },
    )

@app.get("/health")
def health():
    return {"status": "ok"}
