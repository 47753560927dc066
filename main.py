from uuid import uuid4

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.apis.flashcards.main import router as flashcards_router
from app.core.config import settings
from app.core.exceptions import FlashForgeError
from app.core.logging import bind_request, get_logger, request_id_var, setup_logging

logger = get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"


async def flashforge_error_handler(request: Request, exc: FlashForgeError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.warning("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


async def validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    logger.info("Rejected malformed request to %s", request.url.path)
    return JSONResponse(status_code=400, content={"error": "Invalid request body"})


async def request_context(request: Request, call_next):
    token = bind_request(request.headers.get(REQUEST_ID_HEADER) or uuid4().hex[:12])
    try:
        response = await call_next(request)
        response.headers[REQUEST_ID_HEADER] = request_id_var.get()
        return response
    finally:
        request_id_var.reset(token)


def create_app() -> FastAPI:
    setup_logging()
    app = FastAPI(title=settings.app.name, version=settings.app.version)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["http://localhost:3000"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.middleware("http")(request_context)

    app.add_exception_handler(FlashForgeError, flashforge_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)

    app.include_router(flashcards_router)

    @app.get("/")
    async def root():
        return {
            "status": "ok",
            "app": settings.app.name,
            "version": settings.app.version,
        }

    return app


app = create_app()


if __name__ == "__main__":
    logger.info("Starting %s on port %d", settings.app.name, settings.app.port)
    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=settings.app.port,
        reload=not settings.app.is_production,
    )
