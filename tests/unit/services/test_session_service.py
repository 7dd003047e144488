import pytest
from pydantic import SecretStr
from app.domain.auth.schemas import SessionState
from app.domain.exceptions import Conflict, GraphQLRequestError, Unauthorized
from app.domain.users.models import User
from app.domain.users.schemas import LoginDTO, RegisterDTO, UpdatePhoneDTO
from app.services.session_service import SessionStore
from tests.helper import redis_mock

API_USER = {"id": 1, "name": "Ana", "email": "ana@example.com", "cpf": "12345678909", "role": "CUSTOMER"}
API_TICKET = {"id": "t1", "code": "C1", "event": {"id": "e1", "title": "Show"}}


def _register_dto() -> RegisterDTO:
    return RegisterDTO(name="Ana", email="ana@example.com", password="secret1", cpf="123.456.789-09",
                       birth_date="1990-05-01", phone_country_code="55", phone_area_code="11",
                       phone_number="99999-8888")


@pytest.fixture
def patch_crud(mocker):
    def _patch(**funcs):
        mocks = {}
        for name, value in funcs.items():
            module = "tickets_crud" if name == "my_tickets" else "users_crud"
            mocks[name] = mocker.patch(f"app.services.session_service.{module}.{name}",
                                       new=mocker.AsyncMock(**value))
        return mocks
    return _patch


@pytest.mark.asyncio
async def test_login_starts_session_with_wallet(mocker, patch_crud, auditspan_stub):
    mocks = patch_crud(login={"return_value": {"token": "tok", "user": API_USER}},
                       my_tickets={"return_value": [API_TICKET]})
    r = redis_mock(mocker)
    store = SessionStore(mocker.Mock(), r)

    token, state = await store.login(LoginDTO(email="ana@example.com", password="pw"))

    assert token == "tok"
    assert state.user.id == "1"
    assert [t.id for t in state.tickets] == ["t1"]
    mocks["login"].assert_awaited_once()
    r.set.assert_awaited_once()
    key = r.set.await_args.args[0]
    assert key.startswith("session:") and "tok" not in key
    assert auditspan_stub[0].object_id == "1"


@pytest.mark.asyncio
@pytest.mark.parametrize("result", [GraphQLRequestError(["invalid credentials"]), None, {"token": None}])
async def test_login_failures_raise_unauthorized(mocker, patch_crud, result):
    if isinstance(result, Exception):
        patch_crud(login={"side_effect": result})
    else:
        patch_crud(login={"return_value": result})
    store = SessionStore(mocker.Mock(), redis_mock(mocker))

    with pytest.raises(Unauthorized) as e:
        await store.login(LoginDTO(email="ana@example.com", password=SecretStr("bad")))
    assert str(e.value) == "E-mail ou senha incorretos"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "message, expected",
    [
        ("UNIQUE constraint failed: users.cpf", "CPF já cadastrado."),
        ("UNIQUE constraint failed: users.email", "E-mail já cadastrado ou dados inválidos."),
    ]
)
async def test_register_conflicts(mocker, patch_crud, message, expected):
    patch_crud(register={"side_effect": GraphQLRequestError([message])})
    store = SessionStore(mocker.Mock(), redis_mock(mocker))

    with pytest.raises(Conflict) as e:
        await store.register(_register_dto())
    assert str(e.value) == expected


@pytest.mark.asyncio
async def test_register_sends_normalized_payload(mocker, patch_crud):
    mocks = patch_crud(register={"return_value": {"token": "tok", "user": API_USER}},
                       my_tickets={"return_value": []})
    store = SessionStore(mocker.Mock(), redis_mock(mocker))

    await store.register(_register_dto())

    payload = mocks["register"].await_args.args[1]
    assert payload["cpf"] == "12345678909"
    assert payload["phoneNumber"] == "999998888"
    assert payload["birthDate"] == "1990-05-01"


@pytest.mark.asyncio
async def test_restore_prefers_cached_state(mocker, patch_crud):
    mocks = patch_crud(me={"return_value": API_USER})
    cached = SessionState(user=User(id="1", name="Ana", email="ana@example.com")).model_dump_json()
    store = SessionStore(mocker.Mock(), redis_mock(mocker, get=cached))

    state = await store.restore("tok")

    assert state.user.name == "Ana"
    mocks["me"].assert_not_awaited()


@pytest.mark.asyncio
async def test_restore_falls_back_to_upstream_user(mocker, patch_crud):
    patch_crud(me={"return_value": API_USER}, my_tickets={"return_value": [API_TICKET]})
    r = redis_mock(mocker)
    store = SessionStore(mocker.Mock(), r)

    state = await store.restore("tok")

    assert state.user.email == "ana@example.com"
    assert len(state.tickets) == 1
    r.set.assert_awaited_once()


@pytest.mark.asyncio
async def test_restore_unknown_session_raises_unauthorized(mocker, patch_crud):
    patch_crud(me={"return_value": None})
    store = SessionStore(mocker.Mock(), redis_mock(mocker))

    with pytest.raises(Unauthorized):
        await store.restore("tok")


@pytest.mark.asyncio
async def test_refresh_tickets_replaces_wallet(mocker, patch_crud):
    patch_crud(my_tickets={"return_value": [API_TICKET, {**API_TICKET, "id": "t2"}]})
    cached = SessionState(user=User(id="1", name="Ana", email="ana@example.com")).model_dump_json()
    r = redis_mock(mocker, get=cached)
    store = SessionStore(mocker.Mock(), r)

    tickets = await store.refresh_tickets("tok")

    assert [t.id for t in tickets] == ["t1", "t2"]
    saved = SessionState.model_validate_json(r.set.await_args.args[1])
    assert len(saved.tickets) == 2


@pytest.mark.asyncio
async def test_update_phone_failure_raises_conflict(mocker, patch_crud):
    patch_crud(update_phone={"side_effect": GraphQLRequestError(["nope"])})
    cached = SessionState(user=User(id="1", name="Ana", email="ana@example.com")).model_dump_json()
    store = SessionStore(mocker.Mock(), redis_mock(mocker, get=cached))
    schema = UpdatePhoneDTO(phone_country_code="55", phone_area_code="21", phone_number="3333-4444")

    with pytest.raises(Conflict, match="Erro ao atualizar telefone."):
        await store.update_phone("tok", schema)


@pytest.mark.asyncio
async def test_logout_drops_cached_state(mocker):
    r = redis_mock(mocker)
    store = SessionStore(mocker.Mock(), r)

    await store.logout("tok")

    r.delete.assert_awaited_once()
