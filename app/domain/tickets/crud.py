from typing import Any
from app.core.graphql import GraphQLClient

QUERY_MY_TICKETS = """
query MyTickets {
  myTickets {
    id
    code
    qrCode
    used
    createdAt
    event { id title coverImage location }
    eventDate { id date startTime }
    ticketType { id name }
    owner { id name cpf }
  }
}
"""

MUTATION_VALIDATE_TICKET = """
mutation ValidateTicket($eventId: ID!, $qrCode: String!) {
  validateTicket(eventId: $eventId, qrCode: $qrCode) {
    success
    errorCode
    message
    ticket {
      id
      code
      used
      usedAt
      ticketType { name }
      owner { name }
    }
  }
}
"""


async def my_tickets(gql: GraphQLClient, token: str) -> list[dict[str, Any]]:
    data = await gql.query(QUERY_MY_TICKETS, token=token)
    return data.get("myTickets") or []


async def validate_ticket(gql: GraphQLClient, token: str, event_id: str, qr_code: str) -> dict[str, Any] | None:
    data = await gql.mutate(MUTATION_VALIDATE_TICKET, {"eventId": event_id, "qrCode": qr_code}, token=token)
    return data.get("validateTicket")
