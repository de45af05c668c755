from __future__ import annotations

import logging
from datetime import datetime, timezone

from fastapi import Depends, FastAPI

from .context import startup_time
from .dependencies import get_system, to_http_error
from .models.schemas import HealthResponse
from .routes import announcements, auth, punch, register, timesheets
from core.errors import StoreUnavailable
from core.system import TimeclockSystem

logger = logging.getLogger(__name__)

app = FastAPI(
    title="Site Timeclock API",
    version="1.0.0",
    description="Face-identified punch clock and timesheet API for construction sites.",
)


@app.on_event("startup")
async def on_startup():
    """
    Report how many identities are enrolled. An unreachable store is not
    fatal here; requests will surface it as 503.
    """
    system = get_system()
    try:
        count = len(system.gallery.load())
    except StoreUnavailable as exc:
        logger.warning("Identity store unavailable at startup: %s", exc)
        return
    logger.info("Timeclock started with %d enrolled identities", count)


@app.get("/health", response_model=HealthResponse)
async def health(system: TimeclockSystem = Depends(get_system)) -> HealthResponse:
    """
    Return system status, uptime and the number of enrolled identities.
    """
    now = datetime.now(timezone.utc)
    uptime = (now - startup_time).total_seconds()

    try:
        enrolled = len(system.gallery.load())
    except StoreUnavailable as exc:
        raise to_http_error(exc)

    return HealthResponse(
        status="ok",
        uptime_seconds=uptime,
        storage_backend=system.settings.storage_backend,
        enrolled_identities=enrolled,
    )


app.include_router(auth.router, prefix="", tags=["auth"])
app.include_router(register.router, prefix="", tags=["register"])
app.include_router(punch.router, prefix="", tags=["attendance"])
app.include_router(timesheets.router, prefix="", tags=["timesheets"])
app.include_router(announcements.router, prefix="", tags=["announcements"])


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)
