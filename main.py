from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.exc import SQLAlchemyError

from app.api.v1 import funnel, students, sales, products, dashboard
from app.api.errors import store_unavailable_handler
from app.api.health import router as health_router
from app.core.config import settings
from app.core.database import SessionFactory, close_db, init_db
from app.core.logging import setup_logging, get_logger
from app.core.middleware import RequestLoggingMiddleware, ErrorHandlingMiddleware
from app.services.record_store import RecordStore, StoreUnavailable

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()

    # Startup - create tables and seed the course catalogue
    try:
        await init_db()
        if settings.SEED_PRODUCTS:
            async with SessionFactory() as session:
                await RecordStore(session).ensure_products()
                await session.commit()
    except (StoreUnavailable, SQLAlchemyError, OSError) as e:
        logger.warning("startup_seed_failed", error=str(e))

    yield

    # Shutdown
    await close_db()


app = FastAPI(
    title=settings.APP_NAME,
    description="Sales funnel tracking and conversion analytics for course enrolment",
    version=settings.APP_VERSION,
    lifespan=lifespan,
)
app.state.debug = settings.DEBUG

# Add middleware (order matters - last added = first executed)
app.add_middleware(ErrorHandlingMiddleware)
app.add_middleware(RequestLoggingMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_exception_handler(StoreUnavailable, store_unavailable_handler)

app.include_router(health_router)
app.include_router(funnel.router, prefix="/api/v1", tags=["funnel"])
app.include_router(students.router, prefix="/api/v1/students", tags=["students"])
app.include_router(products.router, prefix="/api/v1/products", tags=["products"])
app.include_router(sales.router, prefix="/api/v1/sales", tags=["sales"])
app.include_router(dashboard.router, tags=["dashboard"])

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
