import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from shopdesk.api.v1.assistant import router as assistant_router
from shopdesk.api.v1.auth import router as auth_router
from shopdesk.api.v1.inventory import router as inventory_router
from shopdesk.api.v1.reports import router as reports_router
from shopdesk.api.v1.salon import router as salon_router
from shopdesk.core.config import settings
from shopdesk.wiring.dependencies import startup


class ContextFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        extras = []
        for key in ("booking_id", "customer_id", "barcode", "kind", "count", "reason", "error"):
            value = getattr(record, key, None)
            if value not in (None, ""):
                extras.append(f"{key}={value}")
        base = super().format(record)
        if extras:
            return f"{base} | " + " ".join(extras)
        return base


handler = logging.StreamHandler()
handler.setFormatter(ContextFormatter("%(levelname)s:%(name)s:%(message)s"))

root = logging.getLogger()
root.setLevel(getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO))
root.handlers.clear()
root.addHandler(handler)


@asynccontextmanager
async def lifespan(app: FastAPI):
    startup()
    yield


app = FastAPI(title="Salon Desk", version="0.1.0", lifespan=lifespan)

app.include_router(auth_router, prefix="/api/v1/auth", tags=["auth"])
app.include_router(salon_router, prefix="/api/v1", tags=["salon"])
app.include_router(reports_router, prefix="/api/v1/reports", tags=["reports"])
app.include_router(inventory_router, prefix="/api/v1/inventory", tags=["inventory"])
app.include_router(assistant_router, prefix="/api/v1/assistant", tags=["assistant"])


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}
