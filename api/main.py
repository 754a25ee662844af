"""
FastAPI Backend dla edytora i podglądu spelli.

Endpoints:
    GET  /api/health                   - health check
    GET  /api/spells                   - lista wpisów katalogu
    GET  /api/spells/{key}             - definicja wpisu
    POST /api/spells/build             - złóż spell (z kluczy lub losowo)
    POST /api/spells/cast              - złóż i rzuć spell w arenie testowej
    POST /api/formulas/evaluate        - ewaluuj formułę RPN
    GET  /api/formulas/validate        - zwaliduj formuły w data/
    GET  /api/classes                  - lista klas gracza
    GET  /api/classes/{id}/stats?wave= - statystyki klasy dla fali
    GET  /api/relics                  - lista reliktów
    GET  /api/relics/offer?wave=&seed= - oferta reliktów po fali
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
import logging
import sys
from pathlib import Path

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from api.routers import spells, formulas, classes, relics

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown events."""
    logger.info("Spellcraft API starting...")
    yield
    logger.info("Spellcraft API shutting down...")


app = FastAPI(
    title="Spellcraft API",
    description="Spell catalog, composition and RPN formula preview",
    version="1.0.0",
    lifespan=lifespan,
)

# CORS - allow all origins (including file://)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API routers
app.include_router(spells.router, prefix="/api", tags=["Spells"])
app.include_router(formulas.router, prefix="/api", tags=["Formulas"])
app.include_router(classes.router, prefix="/api", tags=["Classes"])
app.include_router(relics.router, prefix="/api", tags=["Relics"])


@app.get("/api/health")
async def health():
    """API health check."""
    return {"status": "healthy"}
