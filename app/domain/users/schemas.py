from datetime import date
from pydantic import BaseModel, EmailStr, Field, field_validator, ConfigDict, SecretStr, model_validator
from app.core.utils.text_utils import strip_text
from app.core.utils.validators import normalize_cpf, sanitize_phone, validate_phone_parts, format_full_phone
from app.domain.users.models import User


class _PhoneParts(BaseModel):
    phone_country_code: str = Field(min_length=1, max_length=4)
    phone_area_code: str = Field(min_length=1, max_length=3)
    phone_number: str = Field(min_length=1, max_length=20)

    @field_validator("phone_country_code", "phone_area_code", mode="before")
    def _digits_only(cls, v):
        return sanitize_phone(v) if isinstance(v, str) else v

    @model_validator(mode="after")
    def _valid_phone(self):
        validate_phone_parts(self.phone_country_code, self.phone_area_code, self.phone_number)
        self.phone_number = sanitize_phone(self.phone_number)
        return self


class LoginDTO(BaseModel):
    model_config = ConfigDict(extra='forbid')

    email: EmailStr
    password: SecretStr = Field(min_length=1)


class RegisterDTO(_PhoneParts):
    model_config = ConfigDict(extra='forbid')

    name: str = Field(min_length=2, max_length=256)
    email: EmailStr
    password: SecretStr = Field(min_length=6, max_length=128)
    cpf: str
    birth_date: date

    _strip_name = field_validator("name", mode="before")(strip_text)

    @field_validator("cpf", mode="before")
    def _cpf(cls, v):
        return normalize_cpf(v)


class UpdatePhoneDTO(_PhoneParts):
    model_config = ConfigDict(extra='forbid')


class UpdatePhotoDTO(BaseModel):
    model_config = ConfigDict(extra='forbid')

    photo_base64: str = Field(min_length=16)


class UserReadDTO(BaseModel):
    id: str
    name: str
    email: str
    cpf: str
    birth_date: str | None
    role: str
    phone: str | None
    photo_url: str | None

    @classmethod
    def from_user(cls, user: User) -> "UserReadDTO":
        phone = None
        if user.has_phone:
            phone = format_full_phone(user.phone_country_code, user.phone_area_code, user.phone_number)
        return cls(
            id=user.id,
            name=user.name,
            email=user.email,
            cpf=user.cpf,
            birth_date=user.birth_date,
            role=user.role,
            phone=phone,
            photo_url=user.photo_url,
        )
