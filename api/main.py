"""
FastAPI Backend dla TFT DPS Simulator.

Endpoints:
    GET  /api/units          - lista jednostek
    GET  /api/units/{name}   - szczegóły jednostki
    GET  /api/items          - lista itemów
    GET  /api/items/{name}   - szczegóły itema
    GET  /api/augments       - lista augmentów
    POST /api/simulate       - uruchom symulację
    POST /api/compare        - porównaj buildy
    GET  /api/health         - health check

Uruchomienie:
    uvicorn api.main:app --reload
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.routers import units, items, simulation


app = FastAPI(
    title="TFT DPS Simulator API",
    description="Backend API for comparing TFT item builds",
    version="0.1.0",
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
app.include_router(units.router, prefix="/api", tags=["Units"])
app.include_router(items.router, prefix="/api", tags=["Items"])
app.include_router(simulation.router, prefix="/api", tags=["Simulation"])


@app.get("/api/health")
async def health():
    """API health check."""
    return {"status": "healthy"}
