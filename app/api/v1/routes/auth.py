from typing import Annotated
from fastapi import APIRouter, Depends, status, Response
from fastapi.security import OAuth2PasswordRequestForm
from pydantic import ValidationError
from app.core.dependencies.auth import auth_dependency, get_session_store
from app.domain.auth.schemas import AuthSessionDTO, SessionState
from app.domain.exceptions import Unauthorized
from app.domain.users.schemas import LoginDTO, RegisterDTO, UserReadDTO
from app.services.session_service import SessionStore

router = APIRouter(prefix='/auth', tags=['auth'])
sessions_dependency = Annotated[SessionStore, Depends(get_session_store)]


def _session_dto(token: str, state: SessionState) -> AuthSessionDTO:
    return AuthSessionDTO(access_token=token, user=UserReadDTO.from_user(state.user), tickets_count=len(state.tickets))


@router.post(
    '/register',
    status_code=status.HTTP_201_CREATED,
    response_model=AuthSessionDTO
)
async def register(schema: RegisterDTO, sessions: sessions_dependency, response: Response):
    token, state = await sessions.register(schema)
    response.headers['Location'] = "/users/me"
    return _session_dto(token, state)


@router.post("/login", response_model=AuthSessionDTO)
async def login(form: Annotated[OAuth2PasswordRequestForm, Depends()], sessions: sessions_dependency):
    try:
        schema = LoginDTO(email=form.username, password=form.password)
    except ValidationError as e:
        raise Unauthorized("E-mail ou senha incorretos", ctx={"reason": "bad_credentials"}) from e
    token, state = await sessions.login(schema)
    return _session_dto(token, state)


@router.post("/login/json", response_model=AuthSessionDTO)
async def login_json(schema: LoginDTO, sessions: sessions_dependency):
    token, state = await sessions.login(schema)
    return _session_dto(token, state)


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
async def logout(auth: auth_dependency, sessions: sessions_dependency):
    await sessions.logout(auth.token)
