import pytest
from pydantic import ValidationError
from app.domain.users.models import User
from app.domain.users.schemas import RegisterDTO, UpdatePhoneDTO, UserReadDTO


test_user_payload = {
    "name": "Ana Souza",
    "email": "ana@example.com",
    "password": "secret1",
    "cpf": "123.456.789-09",
    "birth_date": "1990-05-01",
    "phone_country_code": "55",
    "phone_area_code": "11",
    "phone_number": "99999-8888",
}


def create_payload(**override):
    data = dict(test_user_payload)
    data.update(override)
    return data


def test_register_normalizes_cpf_and_phone():
    dto = RegisterDTO(**create_payload())
    assert dto.cpf == "12345678909"
    assert dto.phone_number == "999998888"


@pytest.mark.parametrize(
    "override, message",
    [
        ({"cpf": "123.456"}, "CPF inválido"),
        ({"phone_area_code": "1"}, "DDD deve ter 2 dígitos"),
        ({"phone_area_code": "09"}, "DDD inválido"),
        ({"phone_number": "1234-567"}, "Número deve ter 8 ou 9 dígitos"),
        ({"phone_country_code": "1", "phone_number": "123"}, "Número muito curto"),
    ]
)
def test_register_rejects_invalid_documents(override, message):
    with pytest.raises(ValidationError) as e:
        RegisterDTO(**create_payload(**override))
    assert message in str(e.value)


def test_register_rejects_unknown_fields():
    with pytest.raises(ValidationError):
        RegisterDTO(**create_payload(role="ADMIN"))


def test_update_phone_strips_area_code_formatting():
    dto = UpdatePhoneDTO(phone_country_code="+55", phone_area_code="(21)", phone_number="3333 4444")
    assert (dto.phone_country_code, dto.phone_area_code, dto.phone_number) == ("55", "21", "33334444")


def test_user_read_dto_formats_phone():
    user = User(id="1", name="Ana", email="ana@example.com", phone_country_code="55", phone_area_code="11",
                phone_number="999998888")
    assert UserReadDTO.from_user(user).phone == "+55 (11) 99999-8888"
    assert UserReadDTO.from_user(user.model_copy(update={"phone_number": None})).phone is None
