from fastapi import FastAPI, Depends, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from pymongo.database import Database

from treeplant.event_routes import event_router
from treeplant.join_routes import join_router
from treeplant.models import HealthResponse
from treeplant.mongo import get_db, lifespan
from treeplant.user_routes import user_router
from treeplant.utils.config import Config
from treeplant.utils.logger import get_logger

logger = get_logger(__name__)


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Report malformed request data as 400 with a single readable message."""
    errors = exc.errors()
    if errors:
        first = errors[0]
        field = ".".join(str(part) for part in first.get("loc", ()) if part not in ("body", "query"))
        message = f"{field}: {first.get('msg')}" if field else first.get("msg")
    else:
        message = "Invalid request"
    logger.warning(f"Rejected {request.method} {request.url.path}: {message}")
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"detail": message})


def create_app(use_lifespan: bool = True) -> FastAPI:
    app = FastAPI(title="TreePlant Events API", lifespan=lifespan if use_lifespan else None)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=Config.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(RequestValidationError, validation_exception_handler)

    app.include_router(user_router)
    app.include_router(event_router)
    app.include_router(join_router)

    @app.get("/", response_class=PlainTextResponse)
    def root():
        return "Server is running successfully"

    @app.get("/health", response_model=HealthResponse)
    def health_check():
        """Health check endpoint."""
        return {"status": "ok"}

    @app.get("/db-check")
    def db_check(db: Database = Depends(get_db)):
        """Check if MongoDB connection is alive."""
        try:
            db.command("ping")
            return {"status": "ok", "message": "MongoDB connection successful"}
        except Exception as e:
            logger.error(f"MongoDB ping failed: {e}")
            return {"status": "error", "message": str(e)}

    return app


app = create_app()


def main():
    import uvicorn

    logger.info(f"Server is running on {Config.PORT}")
    uvicorn.run(app, host=Config.HOST, port=Config.PORT)


if __name__ == "__main__":
    # Run with: python -m treeplant.server
    main()
