from fastapi import FastAPI

from pricing_engine.api.v1.routes_checkout import router as checkout_router
from pricing_engine.core.config import settings
from pricing_engine.core.logging import configure_logging

configure_logging(settings.LOG_LEVEL)

app = FastAPI(title="Storefront Pricing Engine")

app.include_router(checkout_router)

@app.get("/health")
async def health():
    return {"status": "ok"}
