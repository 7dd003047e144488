from pydantic import BaseModel, Field
from typing import Literal
from app.domain.tickets.models import Ticket
from app.domain.users.models import User
from app.domain.users.schemas import UserReadDTO


class SessionState(BaseModel):
    user: User
    tickets: list[Ticket] = Field(default_factory=list)


class AuthSessionDTO(BaseModel):
    access_token: str
    token_type: Literal["bearer"] = "bearer"
    user: UserReadDTO
    tickets_count: int
