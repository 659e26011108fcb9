# Role: FastAPI app bootstrap. Loads environment config early, sets up logging, registers routers,
# and exposes health/docs endpoints.

from fastapi import FastAPI

import backend.config
backend.config.load_env()

from backend.api.chat import router as chat_router
from backend.api.state import router as state_router
from backend.utils.logging import setup_logging

setup_logging(backend.config.settings().log_level)

app = FastAPI(title="MOKSH Agri-Assistant API", version="0.1.0")
app.include_router(chat_router)
app.include_router(state_router)


@app.get("/")
def root() -> dict:
    # Role: quick discoverability for clients (where are docs/health).
    return {
        "message": "MOKSH Agri-Assistant API is running",
        "docs": "/docs",
        "health": "/health",
    }


@app.get("/health")
def health() -> dict:
    return {"status": "ok"}
