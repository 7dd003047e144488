from typing import Any
from app.core.graphql import GraphQLClient

EVENT_FIELDS = """
    id
    title
    description
    category
    coverImage
    location
    address
    status
    featured
    dates {
      id
      date
      startTime
      endTime
      lots {
        id
        name
        active
        availableQuantity
        totalQuantity
        ticketTypes {
          id
          name
          description
          price
          audience
          maxQuantity
          soldQuantity
        }
      }
    }
"""

QUERY_EVENTS = f"""
query Events($filter: EventFilter) {{
  events(filter: $filter) {{
    {EVENT_FIELDS}
  }}
}}
"""

QUERY_EVENT = f"""
query Event($id: ID!) {{
  event(id: $id) {{
    {EVENT_FIELDS}
    producer {{
      id
      user {{
        id
        name
        photoUrl
      }}
    }}
  }}
}}
"""


async def list_events(gql: GraphQLClient, category: str | None = None) -> list[dict[str, Any]]:
    variables = {"filter": {"category": category}} if category else {}
    data = await gql.query(QUERY_EVENTS, variables)
    return data.get("events") or []


async def get_event(gql: GraphQLClient, event_id: str, *, token: str | None = None) -> dict[str, Any] | None:
    data = await gql.query(QUERY_EVENT, {"id": event_id}, token=token)
    return data.get("event")
