"""FastAPI application."""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from locallens.api.routes.bookings import router as bookings_router
from locallens.api.routes.concierge import router as concierge_router
from locallens.api.routes.guides import router as guides_router
from locallens.api.routes.health import router as health_router
from locallens.api.routes.itineraries import router as itineraries_router
from locallens.api.routes.metrics import router as metrics_router
from locallens.api.routes.planner import router as planner_router
from locallens.api.routes.profiles import router as profiles_router
from locallens.config import get_settings

settings = get_settings()

app = FastAPI(title="LocalLens API", version="0.1.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.ui_origin],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register routes
app.include_router(health_router, tags=["health"])
app.include_router(metrics_router, tags=["metrics"])
app.include_router(planner_router)
app.include_router(itineraries_router)
app.include_router(bookings_router)
app.include_router(guides_router)
app.include_router(profiles_router)
app.include_router(concierge_router)

# Uploaded avatars and verification documents
app.mount(
    "/storage",
    StaticFiles(directory=settings.storage_root, check_dir=False),
    name="storage",
)


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint."""
    return {"message": "LocalLens API", "version": "0.1.0"}
