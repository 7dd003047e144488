from typing import Annotated
from fastapi import APIRouter, Depends, status
from app.core.dependencies.auth import auth_dependency, get_session_store
from app.domain.users.schemas import UpdatePhoneDTO, UpdatePhotoDTO, UserReadDTO
from app.services.session_service import SessionStore

router = APIRouter(tags=["users"])
sessions_dependency = Annotated[SessionStore, Depends(get_session_store)]


@router.get(
    "/users/me",
    status_code=status.HTTP_200_OK,
    response_model=UserReadDTO
)
async def get_me(auth: auth_dependency):
    return UserReadDTO.from_user(auth.user)


@router.post(
    "/users/me/refresh",
    status_code=status.HTTP_200_OK,
    response_model=UserReadDTO
)
async def refresh_me(auth: auth_dependency, sessions: sessions_dependency):
    return UserReadDTO.from_user(await sessions.refresh_user(auth.token))


@router.put(
    "/users/me/phone",
    status_code=status.HTTP_200_OK,
    response_model=UserReadDTO
)
async def update_my_phone(schema: UpdatePhoneDTO, auth: auth_dependency, sessions: sessions_dependency):
    return UserReadDTO.from_user(await sessions.update_phone(auth.token, schema))


@router.put(
    "/users/me/photo",
    status_code=status.HTTP_200_OK,
    response_model=UserReadDTO
)
async def update_my_photo(schema: UpdatePhotoDTO, auth: auth_dependency, sessions: sessions_dependency):
    return UserReadDTO.from_user(await sessions.update_profile_photo(auth.token, schema))
