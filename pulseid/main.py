import logging

from fastapi import FastAPI

from pulseid.config import settings
from pulseid.emergency.router import router as emergency_router

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s | %(name)s | %(levelname)s | %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="PulseID", version="0.1.0")
app.include_router(emergency_router)


@app.get("/")
async def root() -> dict:
    return {
        "status": "ok",
        "docs": "/docs",
        "health": "/health",
        "emergency": {
            "share": "/emergency/share",
            "report": "/emergency/report?data={payload}",
            "assess": "/emergency/assess",
            "bmi": "/emergency/bmi",
        },
        "error_correction": settings.qr_error_correction,
    }


@app.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok"}
