from __future__ import annotations

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from cdash.config import settings
from cdash.routes import analytics as analytics_routes

logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    app = FastAPI(title=settings.app_name)

    origins = [o.strip() for o in settings.cors_origins.split(",") if o.strip()]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins or ["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(analytics_routes.router)

    @app.get("/healthz")
    def healthz():
        return {"status": "ok"}

    # Log path config clearly for debugging
    logger.info("[CONFIG] APP_ENV=%s", settings.env)
    logger.info("[CONFIG] SNAPSHOT_PATH=%s", settings.snapshot_path)
    logger.info("[CONFIG] AREA_TOP_N=%s", settings.area_top_n)
    logger.info(
        "[CONFIG] RISK weights=(%s, %s) thresholds=(medium>%s, high>%s)",
        settings.risk_volume_weight,
        settings.risk_ratio_weight,
        settings.risk_medium_threshold,
        settings.risk_high_threshold,
    )

    return app


app = create_app()
