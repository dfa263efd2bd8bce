# resto_ledger/main.py
from __future__ import annotations
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from .db import ensure_tables
from .utils.config import APP_NAME, APP_VERSION, LOG_LEVEL

log = logging.getLogger("resto_ledger")

def configure_logging(level: str = LOG_LEVEL) -> None:
    logging.basicConfig(level=level.upper(), format="[resto] %(levelname)s %(name)s: %(message)s")

@asynccontextmanager
async def lifespan(_: FastAPI):
    # 啟動時確保表存在
    ensure_tables()
    log.info("tables ready")
    yield

def create_app() -> FastAPI:
    configure_logging()
    app = FastAPI(title=APP_NAME, version=APP_VERSION, lifespan=lifespan)

    @app.get("/health")
    def health():
        return {"ok": True, "version": APP_VERSION}

    return app

app = create_app()

if __name__ == "__main__":
    import uvicorn
    uvicorn.run("resto_ledger.main:app", host="127.0.0.1", port=8000)
