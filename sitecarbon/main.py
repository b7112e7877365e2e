import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .routes.ai_insights import router as ai_insights_router
from .routes.carbon import router as carbon_router
from .routes.materials import router as materials_router
from .services.emission_factors import get_emission_factors
from .settings import settings

logging.basicConfig(
    level=settings.log_level.upper(),
    format="[%(asctime)s] %(levelname)s %(name)s - %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)

app = FastAPI(
    title="Site Carbon Engine",
    version="0.1.0",
    description="Carbon accounting, forecasting and material recommendations for construction sites.",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

# resolve the factor table at startup so profile warnings show up immediately
get_emission_factors()


@app.get("/health")
async def health():
    return {"status": "ok", "service": "site-carbon"}


app.include_router(carbon_router)
app.include_router(materials_router)
app.include_router(ai_insights_router)
