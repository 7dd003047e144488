from typing import Any
from pydantic import BaseModel, ConfigDict


class UserRole:
    CUSTOMER = "CUSTOMER"
    PRODUCER = "PRODUCER"
    ADMIN = "ADMIN"


class User(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    email: str
    cpf: str = ""
    birth_date: str | None = None
    role: str = UserRole.CUSTOMER
    phone_country_code: str | None = None
    phone_area_code: str | None = None
    phone_number: str | None = None
    photo_url: str | None = None
    created_at: str | None = None

    @property
    def has_phone(self) -> bool:
        return bool(self.phone_country_code and self.phone_area_code and self.phone_number)


def map_api_user(u: dict[str, Any]) -> User:
    return User(
        id=str(u["id"]),
        name=u.get("name") or "",
        email=u.get("email") or "",
        cpf=u.get("cpf") or "",
        birth_date=u.get("birthDate"),
        role=u.get("role") or UserRole.CUSTOMER,
        phone_country_code=u.get("phoneCountryCode"),
        phone_area_code=u.get("phoneAreaCode"),
        phone_number=u.get("phoneNumber"),
        photo_url=u.get("photoUrl"),
        created_at=u.get("createdAt"),
    )
