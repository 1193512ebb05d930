from fastapi import APIRouter, HTTPException, Request

router = APIRouter(prefix="/telemetry", tags=["telemetry"])


@router.get("/profile")
def active_profile(request: Request):
    state = request.app.state
    profile = state.telemetry.profile
    return {
        "service": state.service,
        "archive_name": profile.archive_name,
        "sdk_enabled": state.telemetry.sdk_enabled,
        "profile": profile.model_dump(),
    }


@router.get("/profiles")
def list_profiles(request: Request):
    return {"profiles": request.app.state.profiles.list_names()}


@router.get("/profiles/{name}")
def get_profile(name: str, request: Request):
    profile = request.app.state.profiles.get(name)
    if profile is None:
        raise HTTPException(status_code=404, detail="Telemetry profile not found")
    return {"archive_name": profile.archive_name, **profile.model_dump()}
