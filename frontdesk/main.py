"""
Front desk application entry point
Stay billing and checkout settlement for a hotel front desk
"""
import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from frontdesk import __version__
from frontdesk.config import settings
from frontdesk.database import init_db
from frontdesk.routers import rooms, guests, checkin, checkout, payments, reports, todos
from frontdesk.routers import settings as settings_router


def setup_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan: logging, tables, event handlers"""
    setup_logging(settings.LOG_LEVEL)
    init_db()

    from frontdesk.services.event_handlers import register_event_handlers
    register_event_handlers()

    yield


app = FastAPI(
    title=settings.APP_NAME,
    description="Hotel front desk: rooms, check-in, checkout settlement and refunds",
    version=__version__,
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(rooms.router)
app.include_router(checkin.router)
app.include_router(checkout.router)
app.include_router(settings_router.router)
app.include_router(payments.router)
app.include_router(reports.router)
app.include_router(guests.router)
app.include_router(todos.router)


@app.get("/")
def root():
    return {
        "name": settings.APP_NAME,
        "version": __version__,
    }


@app.get("/health")
def health_check():
    return {"status": "healthy"}
