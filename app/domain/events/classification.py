"""Sale-urgency classification and home-page sectioning of events.

Everything here is a pure function of the event list and the current date:
nothing is cached on the events themselves and nothing is written back.
"""
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta, timezone
from typing import Hashable, Iterable
from app.core.config import HOME_SECTION_SIZE
from app.domain.events.models import Event, EventSaleStatus, LotStatus

ULTIMOS_RATIO = 0.10
ESGOTANDO_RATIO = 0.30
NEW_EVENT_WINDOW = timedelta(days=30)

BADGE_LABELS: dict[EventSaleStatus, str | None] = {
    EventSaleStatus.ESGOTADO: "Esgotado",
    EventSaleStatus.ULTIMOS: "Últimos ingressos",
    EventSaleStatus.ESGOTANDO: "Esgotando",
    EventSaleStatus.NOVO: "Novo",
    EventSaleStatus.ATIVO: None,
}


def parse_event_datetime(value: str | None) -> datetime | None:
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _event_days(event: Event) -> list[date]:
    days = []
    for d in event.dates or []:
        parsed = parse_event_datetime(d.date)
        if parsed is not None:
            days.append(parsed.date())
    return days


def _capacity(event: Event) -> tuple[int, int]:
    available = 0
    total = 0
    for variant in event.current_lot.variants():
        available += variant.available
        total += variant.total
    return available, total


def get_event_sale_status(event: Event) -> EventSaleStatus:
    lot = event.current_lot
    if lot.status in (LotStatus.SOLD_OUT, LotStatus.ENDED):
        return EventSaleStatus.ESGOTADO

    available, total = _capacity(event)
    # a lot without ticket types has nothing to sell
    if total == 0:
        return EventSaleStatus.ESGOTADO

    ratio = available / total
    if ratio <= 0:
        return EventSaleStatus.ESGOTADO
    if ratio <= ULTIMOS_RATIO:
        return EventSaleStatus.ULTIMOS
    if ratio <= ESGOTANDO_RATIO:
        return EventSaleStatus.ESGOTANDO
    return EventSaleStatus.ATIVO


def is_event_active(event: Event, today: date | None = None) -> bool:
    if get_event_sale_status(event) == EventSaleStatus.ESGOTADO:
        return False
    today = today or date.today()
    return any(day >= today for day in _event_days(event))


def is_event_new(event: Event, now: datetime | None = None) -> bool:
    starts = [p for p in (parse_event_datetime(d.date) for d in event.dates or []) if p is not None]
    if not starts:
        return False
    now = now or datetime.now(timezone.utc)
    first = min(starts)
    return now < first <= now + NEW_EVENT_WINDOW


def next_event_date(event: Event, today: date | None = None) -> date | None:
    days = sorted(_event_days(event))
    if not days:
        return None
    today = today or date.today()
    upcoming = next((d for d in days if d >= today), None)
    return upcoming if upcoming is not None else days[-1]


def lowest_price(event: Event) -> float:
    prices = [v.price for v in event.current_lot.variants() if v.available > 0]
    return min(prices) if prices else 0


def sold_ratio(event: Event) -> float:
    available, total = _capacity(event)
    if total <= 0:
        return 0
    return (total - available) / total


def badge_for(event: Event, *, show_new: bool = False) -> str | None:
    status = get_event_sale_status(event)
    if status == EventSaleStatus.ATIVO and show_new:
        status = EventSaleStatus.NOVO
    return BADGE_LABELS[status]


@dataclass(frozen=True)
class HomeSections:
    featured: list[Event] = field(default_factory=list)
    trending: list[Event] = field(default_factory=list)
    upcoming: list[Event] = field(default_factory=list)
    recent: list[Event] = field(default_factory=list)
    all: list[Event] = field(default_factory=list)


def _dated(pool: Iterable[Event], today: date) -> list[tuple[Event, date]]:
    out = []
    for event in pool:
        nxt = next_event_date(event, today)
        if nxt is not None:
            out.append((event, nxt))
    return out


def build_home_sections(events: list[Event], today: date | None = None, *,
                        size: int = HOME_SECTION_SIZE) -> HomeSections:
    today = today or date.today()
    active = [e for e in events if is_event_active(e, today)]

    active_featured = [e for e in active if e.featured]
    featured = active_featured if active_featured else [e for e in events if e.featured]

    pool = active if active else list(events)

    # sorted() is stable, ties keep input order
    ranked = [(e, sold_ratio(e)) for e in pool]
    trending = [e for e, r in sorted((x for x in ranked if x[1] > 0), key=lambda x: x[1], reverse=True)][:size]

    upcoming = [e for e, _ in sorted(_dated(pool, today), key=lambda x: x[1])][:size]

    # No creation timestamp is exposed, the farthest date stands in for "added last".
    recent = [e for e, _ in sorted(_dated((e for e in pool if not e.featured), today),
                                   key=lambda x: x[1], reverse=True)][:size]

    return HomeSections(featured=featured, trending=trending, upcoming=upcoming, recent=recent, all=list(events))


class HomeSectionsMemo:
    """Remembers the sections of the last event list it was asked about."""

    def __init__(self) -> None:
        self._key: Hashable | None = None
        self._sections: HomeSections | None = None

    def get(self, key: Hashable, events: list[Event], today: date | None = None) -> HomeSections:
        today = today or date.today()
        full_key = (key, today)
        if self._sections is None or self._key != full_key:
            self._sections = build_home_sections(events, today)
            self._key = full_key
        return self._sections
