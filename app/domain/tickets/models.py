from typing import Any
from pydantic import BaseModel, ConfigDict


class Ticket(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    code: str = ""
    event_id: str = ""
    event_name: str = ""
    event_image: str = ""
    ticket_type: str = ""
    date: str = ""
    time: str = ""
    location: str = ""
    qr_code: str = ""
    used: bool = False
    holder_name: str = ""
    holder_cpf: str = ""
    purchase_date: str = ""


def map_api_ticket(t: dict[str, Any]) -> Ticket:
    event = t.get("event") or {}
    event_date = t.get("eventDate") or {}
    ticket_type = t.get("ticketType") or {}
    owner = t.get("owner") or {}
    return Ticket(
        id=str(t["id"]),
        code=t.get("code") or "",
        event_id=event.get("id") or "",
        event_name=event.get("title") or "",
        event_image=event.get("coverImage") or "",
        ticket_type=ticket_type.get("name") or "",
        date=event_date.get("date") or "",
        time=event_date.get("startTime") or "",
        location=event.get("location") or "",
        qr_code=t.get("qrCode") or "",
        used=bool(t.get("used")),
        holder_name=owner.get("name") or "",
        holder_cpf=owner.get("cpf") or "",
        purchase_date=(t.get("createdAt") or "").split("T")[0],
    )
