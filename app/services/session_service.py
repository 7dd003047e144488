import logging
import redis.asyncio as redis
from app.core.auditing import AuditSpan
from app.core.graphql import GraphQLClient
from app.core.security import session_key_digest, session_ttl_for
from app.domain.auth.schemas import SessionState
from app.domain.exceptions import Conflict, GraphQLRequestError, Unauthorized
from app.domain.tickets import crud as tickets_crud
from app.domain.tickets.models import Ticket, map_api_ticket
from app.domain.users import crud as users_crud
from app.domain.users.models import User, map_api_user
from app.domain.users.schemas import LoginDTO, RegisterDTO, UpdatePhoneDTO, UpdatePhotoDTO

logger = logging.getLogger("app.sessions")

CPF_TAKEN_MARKER = "UNIQUE constraint failed: users.cpf"


class SessionStore:
    """Application-scoped view of the signed-in user and their ticket wallet.

    One instance lives on ``app.state`` for the whole process and is handed to
    routes through a dependency. State is kept in Redis under an HMAC digest
    of the bearer token, with a TTL bounded by the token's own expiry. All
    changes go through the named operations below.
    """

    def __init__(self, gql: GraphQLClient, r: redis.Redis, *, prefix: str = "session") -> None:
        self._gql = gql
        self._redis = r
        self._prefix = prefix

    def _key(self, token: str) -> str:
        return f"{self._prefix}:{session_key_digest(token)}"

    async def _save(self, token: str, state: SessionState) -> SessionState:
        await self._redis.set(self._key(token), state.model_dump_json(), ex=session_ttl_for(token))
        return state

    async def _load(self, token: str) -> SessionState | None:
        raw = await self._redis.get(self._key(token))
        if raw is None:
            return None
        return SessionState.model_validate_json(raw)

    async def _fetch_tickets(self, token: str) -> list[Ticket]:
        return [map_api_ticket(t) for t in await tickets_crud.my_tickets(self._gql, token)]

    async def _start(self, token: str, user: User) -> SessionState:
        state = SessionState(user=user, tickets=await self._fetch_tickets(token))
        return await self._save(token, state)

    async def restore(self, token: str) -> SessionState:
        state = await self._load(token)
        if state is not None:
            return state

        api_user = await users_crud.me(self._gql, token)
        if not api_user:
            raise Unauthorized("Session expired", ctx={"reason": "unknown_session"})
        logger.info("Session restored from upstream user_id=%s", api_user.get("id"))
        return await self._start(token, map_api_user(api_user))

    async def login(self, schema: LoginDTO) -> tuple[str, SessionState]:
        async with AuditSpan(scope="AUTH", action="LOGIN", object_type="session") as span:
            try:
                result = await users_crud.login(self._gql, schema.email, schema.password.get_secret_value())
            except GraphQLRequestError as e:
                raise Unauthorized("E-mail ou senha incorretos", ctx={"reason": "bad_credentials"}) from e
            if not result or not result.get("token"):
                raise Unauthorized("E-mail ou senha incorretos", ctx={"reason": "bad_credentials"})

            token = result["token"]
            user = map_api_user(result["user"])
            span.object_id = user.id
            return token, await self._start(token, user)

    async def register(self, schema: RegisterDTO) -> tuple[str, SessionState]:
        payload = {
            "name": schema.name,
            "email": schema.email,
            "password": schema.password.get_secret_value(),
            "cpf": schema.cpf,
            "birthDate": schema.birth_date.isoformat(),
            "phoneCountryCode": schema.phone_country_code,
            "phoneAreaCode": schema.phone_area_code,
            "phoneNumber": schema.phone_number,
        }
        async with AuditSpan(scope="AUTH", action="REGISTER", object_type="user") as span:
            try:
                result = await users_crud.register(self._gql, payload)
            except GraphQLRequestError as e:
                if any(CPF_TAKEN_MARKER in m for m in e.messages):
                    raise Conflict("CPF já cadastrado.", ctx={"field": "cpf"}) from e
                raise Conflict("E-mail já cadastrado ou dados inválidos.", ctx={"field": "email"}) from e
            if not result or not result.get("token"):
                raise Conflict("E-mail já cadastrado ou dados inválidos.", ctx={"field": "email"})

            token = result["token"]
            user = map_api_user(result["user"])
            span.object_id = user.id
            return token, await self._start(token, user)

    async def logout(self, token: str) -> None:
        await self._redis.delete(self._key(token))

    async def refresh_tickets(self, token: str) -> list[Ticket]:
        state = await self.restore(token)
        tickets = await self._fetch_tickets(token)
        await self._save(token, state.model_copy(update={"tickets": tickets}))
        logger.info("Ticket wallet refreshed user_id=%s count=%d", state.user.id, len(tickets))
        return tickets

    async def refresh_user(self, token: str) -> User:
        state = await self.restore(token)
        api_user = await users_crud.me(self._gql, token)
        if not api_user:
            await self.logout(token)
            raise Unauthorized("Session expired", ctx={"reason": "unknown_session"})
        user = map_api_user(api_user)
        await self._save(token, state.model_copy(update={"user": user}))
        return user

    async def update_phone(self, token: str, schema: UpdatePhoneDTO) -> User:
        state = await self.restore(token)
        async with AuditSpan(scope="USERS", action="UPDATE_PHONE", object_type="user", object_id=state.user.id):
            try:
                api_user = await users_crud.update_phone(
                    self._gql, token, schema.phone_country_code, schema.phone_area_code, schema.phone_number
                )
            except GraphQLRequestError as e:
                raise Conflict("Erro ao atualizar telefone.", ctx={"user_id": state.user.id}) from e
            if not api_user:
                raise Conflict("Erro ao atualizar telefone.", ctx={"user_id": state.user.id})
            user = map_api_user(api_user)
            await self._save(token, state.model_copy(update={"user": user}))
            return user

    async def update_profile_photo(self, token: str, schema: UpdatePhotoDTO) -> User:
        state = await self.restore(token)
        async with AuditSpan(scope="USERS", action="UPDATE_PHOTO", object_type="user", object_id=state.user.id):
            updated = await users_crud.update_profile_photo(self._gql, token, schema.photo_base64)
            if not updated:
                raise Conflict("Erro ao atualizar foto.", ctx={"user_id": state.user.id})
            user = state.user.model_copy(update={
                "name": updated.get("name") or state.user.name,
                "photo_url": updated.get("photoUrl"),
            })
            await self._save(token, state.model_copy(update={"user": user}))
            return user
