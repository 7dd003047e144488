from dataclasses import dataclass
from typing import Annotated
from fastapi import Depends, Request
from fastapi.security import OAuth2PasswordBearer
from app.core.ctx import AUTH_ROLE_CTX, AUTH_USER_ID_CTX
from app.core.security import is_token_expired
from app.domain.auth.schemas import SessionState
from app.domain.exceptions import Forbidden, Unauthorized
from app.domain.users.models import User, UserRole
from app.services.session_service import SessionStore


oauth2_bearer = OAuth2PasswordBearer(tokenUrl="/auth/login")


@dataclass(frozen=True)
class AuthContext:
    token: str
    session: SessionState

    @property
    def user(self) -> User:
        return self.session.user


def get_session_store(request: Request) -> SessionStore:
    return request.app.state.sessions


async def get_token(token: Annotated[str, Depends(oauth2_bearer)]) -> str:
    if is_token_expired(token):
        raise Unauthorized("Session expired", ctx={"reason": "token_expired"})
    return token


async def get_auth(
        token: Annotated[str, Depends(get_token)],
        sessions: Annotated[SessionStore, Depends(get_session_store)],
) -> AuthContext:
    session = await sessions.restore(token)
    AUTH_USER_ID_CTX.set(session.user.id)
    AUTH_ROLE_CTX.set(session.user.role)
    return AuthContext(token=token, session=session)


def require_role(*allowed_roles: str):
    allowed = set(allowed_roles)

    async def _inner(auth: Annotated[AuthContext, Depends(get_auth)]) -> AuthContext:
        if allowed and auth.user.role not in allowed:
            raise Forbidden("Permission denied", ctx={"required": list(allowed_roles), "user_role": auth.user.role})
        return auth
    return _inner


auth_dependency = Annotated[AuthContext, Depends(get_auth)]
producer_dependency = Annotated[AuthContext, Depends(require_role(UserRole.PRODUCER, UserRole.ADMIN))]
