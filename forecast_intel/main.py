"""FastAPI application setup for the forecast-intel service."""

from fastapi import FastAPI

from .api import router as api_router

app = FastAPI(title="Forecast Intel")


@app.get("/healthz")
def healthz():
    """Liveness probe."""
    return {"status": "ok"}


# API routes
app.include_router(api_router, prefix="/v1")
