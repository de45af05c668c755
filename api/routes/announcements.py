# api/routes/announcements.py
from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends

from api.context import startup_time
from api.dependencies import get_system
from api.models.schemas import Announcement
from core.system import TimeclockSystem

router = APIRouter()


@router.get("/safety-announcements", response_model=List[Announcement])
async def list_announcements(system: TimeclockSystem = Depends(get_system)) -> List[Announcement]:
    return [
        Announcement(id=str(index), type=kind, message=message, timestamp=startup_time)
        for index, (kind, message) in enumerate(system.settings.announcements, start=1)
    ]
