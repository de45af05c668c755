# api/routes/auth.py
from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from api.dependencies import get_system, to_http_error
from api.models.schemas import FaceAuthRequest, FaceAuthResponse
from core.errors import AuthenticationError, TimeclockError
from core.system import TimeclockSystem

router = APIRouter()


@router.post("/auth/face", response_model=FaceAuthResponse)
async def authenticate_by_face(
    request: FaceAuthRequest,
    system: TimeclockSystem = Depends(get_system),
) -> FaceAuthResponse:
    try:
        subject_id = system.authenticate_by_face(request.face_descriptor)
        identity = system.get_identity(subject_id)
    except AuthenticationError:
        # Same answer for "nobody enrolled" and "nobody close enough".
        raise HTTPException(status_code=401, detail="Face not recognized")
    except TimeclockError as exc:
        raise to_http_error(exc)

    return FaceAuthResponse(
        subject_id=identity.subject_id,
        role=identity.role.value,
        name=identity.name,
    )
