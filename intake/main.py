from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from intake.api.main import api_router
from intake.logging_config import configure_logging, get_logger
from intake.middleware.request_logging import RequestLoggingMiddleware
from intake.settings import get_settings
from intake.uploads.errors import UploadError

logger = get_logger(name=__name__)


async def upload_error_handler(request: Request, exc: UploadError) -> JSONResponse:
    """Render pipeline errors as structured JSON.

    Pipeline errors are only raised once the caller token has been accepted.
    """
    return JSONResponse(
        status_code=exc.status,
        content={"token": None, "authenticated": True, **exc.to_payload()},
    )


def create_app() -> FastAPI:
    configure_logging()
    settings = get_settings()

    app = FastAPI(title="CSV Upload Intake")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestLoggingMiddleware)
    app.add_exception_handler(UploadError, upload_error_handler)
    app.include_router(api_router)

    logger.info("Uploads root: {}", settings.uploads_root)
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(app, host=settings.uvicorn_host, port=settings.uvicorn_port)
