from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from catalog import router as catalog_router
from core import config, db, errors
from core.logging_config import setup_logging
from service_history import router as service_history_router
from service_types import router as service_types_router
from vehicles import router as vehicles_router


@asynccontextmanager
async def lifespan(_: FastAPI):
    # Initialize the DB pool once per process.
    await db.init_pool()
    try:
        yield
    finally:
        await db.close_pool()


def create_app() -> FastAPI:
    setup_logging(config.log_level())

    app = FastAPI(title="Keep It Cherry API", lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_allow_origins(),
        allow_methods=["*"],
        allow_headers=["*"],
    )
    errors.register_exception_handlers(app)

    app.include_router(vehicles_router.router, tags=["vehicles"])
    app.include_router(service_history_router.router, tags=["service-history"])
    app.include_router(service_types_router.router, tags=["service-types"])
    app.include_router(catalog_router.router, tags=["catalog"])

    @app.get("/health")
    def health() -> dict:
        return {"status": "ok"}

    @app.get("/")
    def root() -> dict:
        return {"message": "Keep It Cherry backend is running with Postgres!"}

    return app


app = create_app()
