import asyncio
import io
import logging
import math
import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, Awaitable, Callable
import qrcode
from anyio import to_thread
from app.core.auditing import AuditSpan
from app.core.config import (PIX_POLL_INTERVAL_SECONDS, PIX_SUCCESS_DELAY_SECONDS, PIX_SESSION_GRACE_SECONDS,
                             PIX_SESSION_MAX_LIFETIME_SECONDS)
from app.domain.exceptions import AppError, Conflict, InvalidInput, NotFound
from app.domain.payments.gateways import PaymentGateway
from app.domain.payments.models import PixCheckoutState, PixPayment
from app.domain.payments.schemas import PixSessionReadDTO

logger = logging.getLogger("app.pix")

EXPIRED_LABEL = "Expirado"

Callback = Callable[[], Awaitable[Any]]


def _now() -> datetime:
    return datetime.now(timezone.utc)


def time_left_label(expires_at: datetime | None, now: datetime) -> str | None:
    if expires_at is None:
        return None
    remaining = math.floor((expires_at - now).total_seconds())
    if remaining <= 0:
        return EXPIRED_LABEL
    minutes, seconds = divmod(remaining, 60)
    return f"{minutes}:{seconds:02d}"


def render_qr_png(code: str) -> bytes:
    qr = qrcode.QRCode(version=None, box_size=8, border=4)
    qr.add_data(code)
    qr.make(fit=True)
    img = qr.make_image(fill_color="black", back_color="white")

    buffered = io.BytesIO()
    img.save(buffered, format="PNG")
    return buffered.getvalue()


async def qr_png(code: str) -> bytes:
    return await to_thread.run_sync(render_qr_png, code)


class PixCheckoutSession:
    """Lifecycle of one PIX payment attempt for a checkout.

    ``idle -> loading -> pix -> success``, with ``loading -> error`` and a
    retry from ``error``. While in ``pix`` two background tasks run: a
    countdown recomputed from the absolute expiry every second, and a poller
    that fires an independent status request every ``poll_interval``
    seconds. Every task captures the generation it was started under and
    drops its result once the generation has moved on, so nothing acts on
    a closed or already-paid session.
    """

    def __init__(self, gateway: PaymentGateway, token: str, checkout_id: str | None, *,
                 owner_id: str | None = None,
                 on_paid: Callback | None = None,
                 on_success: Callback | None = None,
                 poll_interval: float = PIX_POLL_INTERVAL_SECONDS,
                 success_delay: float = PIX_SUCCESS_DELAY_SECONDS) -> None:
        self.id = uuid.uuid4().hex
        self.checkout_id = checkout_id
        self.owner_id = owner_id
        self.state = PixCheckoutState.IDLE
        self.payment: PixPayment | None = None
        self.error: str | None = None
        self.time_left: str | None = None
        self.completed = False
        self.created_at = _now()
        self.completed_at: datetime | None = None

        self._gateway = gateway
        self._token = token
        self._on_paid = on_paid
        self._on_success = on_success
        self._poll_interval = poll_interval
        self._success_delay = success_delay
        self._generation = 0
        self._closed = False
        self._timers: list[asyncio.Task] = []
        self._inflight: set[asyncio.Task] = set()
        self._completing: asyncio.Task | None = None

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def expires_at(self) -> datetime | None:
        return self.payment.expires_at if self.payment else None

    def _live(self, generation: int) -> bool:
        return not self._closed and generation == self._generation and self.state == PixCheckoutState.PIX

    def _spawn(self, coro) -> asyncio.Task:
        task = asyncio.create_task(coro)
        self._inflight.add(task)
        task.add_done_callback(self._inflight.discard)
        return task

    def _stop_timers(self) -> None:
        current = asyncio.current_task()
        for task in self._timers:
            if task is not current:
                task.cancel()
        self._timers.clear()

    async def pay(self) -> PixPayment:
        if not self.checkout_id:
            raise InvalidInput("Checkout ID não encontrado", ctx={"session_id": self.id})
        if self._closed:
            raise Conflict("PIX session is closed", ctx={"session_id": self.id})
        if self.state not in (PixCheckoutState.IDLE, PixCheckoutState.ERROR):
            raise Conflict("PIX payment already started", ctx={"session_id": self.id, "state": self.state})

        self._generation += 1
        generation = self._generation
        self.state = PixCheckoutState.LOADING
        self.error = None

        async with AuditSpan(scope="PAYMENTS", action="PIX_CREATE", object_type="pix_session",
                             object_id=self.id, checkout_id=self.checkout_id) as span:
            try:
                payment = await self._gateway.create_pix_payment(self._token, self.checkout_id)
            except AppError as e:
                if generation == self._generation and not self._closed:
                    self.state = PixCheckoutState.ERROR
                    self.error = str(e)
                e.ctx.setdefault("session_id", self.id)
                raise
            span.meta["provider"] = payment.provider.value

        if self._closed or generation != self._generation:
            return payment

        self.payment = payment
        self.state = PixCheckoutState.PIX
        self.time_left = time_left_label(payment.expires_at, _now())
        self._timers = [
            asyncio.create_task(self._countdown(generation)),
            asyncio.create_task(self._poll_loop(generation)),
        ]
        logger.info("PIX payment created session=%s checkout=%s expires_at=%s",
                    self.id, self.checkout_id, payment.expires_at)
        return payment

    async def _countdown(self, generation: int) -> None:
        if self.expires_at is None:
            return
        while self._live(generation):
            self.time_left = time_left_label(self.expires_at, _now())
            if self.time_left == EXPIRED_LABEL:
                return
            await asyncio.sleep(1)

    async def _poll_loop(self, generation: int) -> None:
        while True:
            await asyncio.sleep(self._poll_interval)
            if not self._live(generation):
                return
            self._spawn(self.poll_once(generation))

    async def poll_once(self, generation: int | None = None) -> bool:
        """Run one status check; return True when it completed the payment."""
        if generation is None:
            generation = self._generation
        if not self._live(generation):
            return False
        try:
            status = await self._gateway.get_payment_status(self._token, self.checkout_id)
        except AppError:
            logger.debug("PIX status poll failed session=%s", self.id, exc_info=True)
            return False

        if not self._live(generation) or not status.paid:
            return False

        await self._complete()
        return True

    async def _complete(self) -> None:
        self._generation += 1
        self._stop_timers()
        # close() must not cancel the wallet refresh once the payment is confirmed
        current = asyncio.current_task()
        if current is not None:
            self._inflight.discard(current)
            self._completing = current
        self.state = PixCheckoutState.SUCCESS
        logger.info("PIX payment confirmed session=%s checkout=%s", self.id, self.checkout_id)

        if self._on_paid is not None:
            try:
                await self._on_paid()
            except AppError:
                logger.warning("Ticket refresh after payment failed session=%s", self.id, exc_info=True)

        await asyncio.sleep(self._success_delay)
        if self._closed:
            return
        self.completed = True
        self.completed_at = _now()
        if self._on_success is not None:
            await self._on_success()

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._generation += 1
        self._stop_timers()
        current = asyncio.current_task()
        for task in list(self._inflight):
            if task is not current:
                task.cancel()
        logger.debug("PIX session closed session=%s state=%s", self.id, self.state.value)

    def finished(self, now: datetime, grace: timedelta, max_lifetime: timedelta) -> bool:
        if self._closed:
            return True
        if self.completed_at is not None:
            return self.completed_at + grace <= now
        if self.created_at + max_lifetime <= now:
            return True
        if self.expires_at is not None and self.expires_at + grace <= now:
            return True
        if self.state in (PixCheckoutState.IDLE, PixCheckoutState.ERROR) and self.created_at + grace <= now:
            return True
        return False

    def to_read_dto(self) -> PixSessionReadDTO:
        if self.state == PixCheckoutState.PIX and self.expires_at is not None:
            self.time_left = time_left_label(self.expires_at, _now())
        return PixSessionReadDTO(
            id=self.id,
            checkout_id=self.checkout_id,
            state=self.state,
            copy_paste=self.payment.copy_paste if self.payment else None,
            qr_code_url=self.payment.qr_code_url if self.payment else None,
            expires_at=self.expires_at,
            time_left=self.time_left,
            error=self.error,
            completed=self.completed,
        )


class PixCheckoutRegistry:
    def __init__(self, gateway: PaymentGateway, *, grace_seconds: int = PIX_SESSION_GRACE_SECONDS,
                 max_lifetime_seconds: int = PIX_SESSION_MAX_LIFETIME_SECONDS) -> None:
        self._gateway = gateway
        self._grace = timedelta(seconds=grace_seconds)
        self._max_lifetime = timedelta(seconds=max_lifetime_seconds)
        self._sessions: dict[str, PixCheckoutSession] = {}

    def __len__(self) -> int:
        return len(self._sessions)

    def open(self, checkout_id: str | None, token: str, owner_id: str, *,
             on_paid: Callback | None = None, **kwargs) -> PixCheckoutSession:
        self.prune()
        session = PixCheckoutSession(self._gateway, token, checkout_id, owner_id=owner_id, on_paid=on_paid, **kwargs)
        self._sessions[session.id] = session
        return session

    async def start(self, checkout_id: str | None, token: str, owner_id: str, *,
                    on_paid: Callback | None = None, **kwargs) -> PixCheckoutSession:
        if not checkout_id:
            raise InvalidInput("Checkout ID não encontrado", ctx={"owner_id": owner_id})
        session = self.open(checkout_id, token, owner_id, on_paid=on_paid, **kwargs)
        await session.pay()
        return session

    def get(self, session_id: str, owner_id: str) -> PixCheckoutSession:
        session = self._sessions.get(session_id)
        if session is None or session.owner_id != owner_id:
            raise NotFound("PIX session not found", ctx={"session_id": session_id})
        return session

    def close(self, session_id: str, owner_id: str) -> None:
        session = self.get(session_id, owner_id)
        session.close()
        del self._sessions[session_id]

    def prune(self, now: datetime | None = None) -> int:
        now = now or _now()
        stale = [sid for sid, s in self._sessions.items() if s.finished(now, self._grace, self._max_lifetime)]
        for sid in stale:
            self._sessions.pop(sid).close()
        if stale:
            logger.debug("Pruned %d PIX sessions", len(stale))
        return len(stale)

    def close_all(self) -> None:
        for session in self._sessions.values():
            session.close()
        self._sessions.clear()
