from typing import Any
from app.core.graphql import GraphQLClient
from app.domain.events.crud import EVENT_FIELDS

QUERY_PRODUCER_EVENTS = f"""
query ProducerEvents {{
  producerEvents {{
    {EVENT_FIELDS}
  }}
}}
"""

QUERY_PRODUCER_PUBLIC_PROFILE = f"""
query ProducerPublicProfile($producerId: ID!) {{
  producerPublicProfile(producerId: $producerId) {{
    producer {{
      id
      user {{ id name photoUrl }}
      companyName
    }}
    events {{
      {EVENT_FIELDS}
    }}
  }}
}}
"""

MUTATION_CREATE_EVENT = """
mutation CreateEvent($input: CreateEventInput!) {
  createEvent(input: $input) { id title status }
}
"""

MUTATION_UPDATE_EVENT = """
mutation UpdateEvent($id: ID!, $input: UpdateEventInput!) {
  updateEvent(id: $id, input: $input) { id title status }
}
"""

MUTATION_PUBLISH_EVENT = """
mutation PublishEvent($id: ID!) {
  publishEvent(id: $id) { id status }
}
"""

MUTATION_UPDATE_EVENT_STATUS = """
mutation UpdateEventStatus($id: ID!, $status: EventStatus!) {
  updateEventStatus(id: $id, status: $status) { id status }
}
"""

MUTATION_CREATE_EVENT_DATE = """
mutation CreateEventDate($eventId: ID!, $input: EventDateInput!) {
  createEventDate(eventId: $eventId, input: $input) { id date startTime endTime }
}
"""

MUTATION_CREATE_LOT = """
mutation CreateLot($dateId: ID!, $input: LotInput!) {
  createLot(dateId: $dateId, input: $input) {
    id name startsAt endsAt totalQuantity availableQuantity active
  }
}
"""

MUTATION_CREATE_TICKET_TYPE = """
mutation CreateTicketType($lotId: ID!, $input: TicketTypeInput!) {
  createTicketType(lotId: $lotId, input: $input) {
    id name price audience maxQuantity soldQuantity
  }
}
"""


async def producer_events(gql: GraphQLClient, token: str) -> list[dict[str, Any]]:
    data = await gql.query(QUERY_PRODUCER_EVENTS, token=token)
    return data.get("producerEvents") or []


async def public_profile(gql: GraphQLClient, producer_id: str) -> dict[str, Any] | None:
    data = await gql.query(QUERY_PRODUCER_PUBLIC_PROFILE, {"producerId": producer_id})
    return data.get("producerPublicProfile")


async def create_event(gql: GraphQLClient, token: str, payload: dict[str, Any]) -> dict[str, Any] | None:
    data = await gql.mutate(MUTATION_CREATE_EVENT, {"input": payload}, token=token)
    return data.get("createEvent")


async def update_event(gql: GraphQLClient, token: str, event_id: str, payload: dict[str, Any]) -> dict[str, Any] | None:
    data = await gql.mutate(MUTATION_UPDATE_EVENT, {"id": event_id, "input": payload}, token=token)
    return data.get("updateEvent")


async def publish_event(gql: GraphQLClient, token: str, event_id: str) -> dict[str, Any] | None:
    data = await gql.mutate(MUTATION_PUBLISH_EVENT, {"id": event_id}, token=token)
    return data.get("publishEvent")


async def update_event_status(gql: GraphQLClient, token: str, event_id: str, status: str) -> dict[str, Any] | None:
    data = await gql.mutate(MUTATION_UPDATE_EVENT_STATUS, {"id": event_id, "status": status}, token=token)
    return data.get("updateEventStatus")


async def create_event_date(gql: GraphQLClient, token: str, event_id: str,
                            payload: dict[str, Any]) -> dict[str, Any] | None:
    data = await gql.mutate(MUTATION_CREATE_EVENT_DATE, {"eventId": event_id, "input": payload}, token=token)
    return data.get("createEventDate")


async def create_lot(gql: GraphQLClient, token: str, date_id: str, payload: dict[str, Any]) -> dict[str, Any] | None:
    data = await gql.mutate(MUTATION_CREATE_LOT, {"dateId": date_id, "input": payload}, token=token)
    return data.get("createLot")


async def create_ticket_type(gql: GraphQLClient, token: str, lot_id: str,
                             payload: dict[str, Any]) -> dict[str, Any] | None:
    data = await gql.mutate(MUTATION_CREATE_TICKET_TYPE, {"lotId": lot_id, "input": payload}, token=token)
    return data.get("createTicketType")
