"""
PulseChart – Main Application Entry Point
===========================================
App FastAPI que expone el núcleo del gráfico (indicadores, formateo de
precios, snapshots headless, preferencias).

ARRANQUE:
  1. Configurar logging
  2. Crear el contenedor de dependencias
  3. Lifespan: inyectar el contenedor al router
  4. DomainError → 422 con el JSON de to_dict()

  uvicorn pulsechart.main:app --reload --host 0.0.0.0 --port 8890
"""

from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from pulsechart import __version__
from pulsechart.container import init_container
from pulsechart.domain.exceptions import DomainError
from pulsechart.presentation.api.routes import init_routes, router
from pulsechart.shared.config.settings import settings
from pulsechart.shared.logging.logger import get_logger, set_library_level, setup_logging

# ─── Logging ────────────────────────────────────────────────────────────
setup_logging("DEBUG" if settings.debug else settings.log_level)
set_library_level(settings.library_log_level)
logger = get_logger("main")

# ─── Contenedor de Dependencias ─────────────────────────────────────────
container = init_container(settings)


# ─── FastAPI Lifespan ───────────────────────────────────────────────────

@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("=" * 60)
    logger.info("  PulseChart v%s", __version__)
    logger.info("  Tema: %s | Tipo: %s | Timeframe: %s",
                settings.theme, settings.chart_type, settings.timeframe)
    logger.info("  Formato de precio: %s (precisión %d)",
                settings.price_format, settings.price_precision)
    logger.info("  Decay de interacción: %.0fs | right_offset: %d",
                settings.interaction_decay_seconds, settings.right_offset)
    logger.info("  Preferencias: %s", settings.preferences_path)
    logger.info("=" * 60)

    init_routes(container)
    logger.info("✓ API lista")

    yield

    logger.info("✓ Shutdown completo")


# ─── FastAPI App ────────────────────────────────────────────────────────

app = FastAPI(
    title="PulseChart",
    description="Indicadores técnicos, formateo de precios y viewport para gráficos de trading en vivo",
    version=__version__,
    lifespan=lifespan,
)

# CORS para frontend local
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(DomainError)
async def domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
    logger.warning("%s %s → %s: %s", request.method, request.url.path, exc.code, exc.message)
    return JSONResponse(status_code=422, content=exc.to_dict())


# Rutas
app.include_router(router)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("pulsechart.main:app", host=settings.host, port=settings.port, reload=settings.debug)
