# api/routes/register.py
from __future__ import annotations

from fastapi import APIRouter, Depends

from api.dependencies import get_system, to_http_error
from api.models.schemas import RegisterRequest, RegisterResponse
from core.errors import TimeclockError
from core.system import TimeclockSystem
from embeddings.models import Role

router = APIRouter()


@router.post("/register", response_model=RegisterResponse)
async def register_worker(
    request: RegisterRequest,
    system: TimeclockSystem = Depends(get_system),
) -> RegisterResponse:
    try:
        identity = system.enroll(
            request.subject_id,
            template=request.face_descriptor,
            role=Role.WORKER,
            name=request.name,
            email=request.email,
        )
    except TimeclockError as exc:
        raise to_http_error(exc)

    return RegisterResponse(
        subject_id=identity.subject_id,
        name=identity.name,
        email=identity.email,
    )
