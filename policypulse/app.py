"""
policypulse/app.py
------------------
FastAPI app for PolicyPulse:

    uvicorn policypulse.app:app
"""

from __future__ import annotations

import logging
import os
from typing import Any, Dict, Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .api import proposals
from .config import configure_logging, load_config
from .service import PolicyPulseService, build_service

log = logging.getLogger(__name__)


def create_app(
    cfg: Optional[Dict[str, Any]] = None,
    service: Optional[PolicyPulseService] = None,
) -> FastAPI:
    cfg = cfg if cfg is not None else load_config(os.getcwd())
    configure_logging(cfg)

    app = FastAPI(title="PolicyPulse API")

    # CORS: tighten in prod if needed
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.state.service = service or build_service(cfg)
    log.info("Using %s backend", type(app.state.service.repository.backend).__name__)

    app.include_router(proposals.router)

    @app.get("/health")
    def health():
        return {"ok": True, "backend_available": app.state.service.repository.backend.is_available()}

    return app


app = create_app()


if __name__ == "__main__":
    # Convenience for: python -m policypulse.app
    import uvicorn

    uvicorn.run(app, host="127.0.0.1", port=8000)
