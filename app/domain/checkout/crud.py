from typing import Any
from app.core.graphql import GraphQLClient

MUTATION_CHECKOUT_PREVIEW = """
mutation CheckoutPreview($input: CheckoutInput!) {
  checkoutPreview(input: $input) {
    checkoutId
    total
    items {
      eventTitle
      eventDate
      ticketTypeName
      quantity
      unitPrice
      subtotal
    }
  }
}
"""


async def checkout_preview(gql: GraphQLClient, token: str, items: list[dict[str, Any]]) -> dict[str, Any] | None:
    data = await gql.mutate(MUTATION_CHECKOUT_PREVIEW, {"input": {"items": items}}, token=token)
    return data.get("checkoutPreview")
