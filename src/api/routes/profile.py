"""Routes for the caller's own preferences."""

from typing import List

from fastapi import APIRouter, HTTPException, status

from core.dependencies import CurrentUserDep, UserManagerDep
from core.exceptions import UserNotFoundError, ValidationError
from schemas.user import PreferenceInfo, SetPreferenceRequest
from utils.converters import model_to_preference_info

router = APIRouter(prefix="/api/profile", tags=["Profile"])


@router.get("/preferences", response_model=List[PreferenceInfo], summary="List preferences")
def list_preferences(
    current_user: CurrentUserDep,
    user_manager: UserManagerDep,
) -> List[PreferenceInfo]:
    return [
        model_to_preference_info(p)
        for p in user_manager.get_preferences(current_user.user_id)
    ]


@router.put("/preferences/{key}", response_model=PreferenceInfo, summary="Set a preference")
def set_preference(
    key: str,
    req: SetPreferenceRequest,
    current_user: CurrentUserDep,
    user_manager: UserManagerDep,
) -> PreferenceInfo:
    try:
        model = user_manager.set_preference(current_user.user_id, key, req.value)
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except UserNotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return model_to_preference_info(model)
