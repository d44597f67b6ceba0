"""
Order lookups: resolve an order number and read its metafields.
"""

import logging
from typing import Dict

from qcsync.db.models import OrderRecord
from qcsync.shopify.client import ShopifyClient, ShopifyClientError

logger = logging.getLogger(__name__)


class OrderNotFoundError(ShopifyClientError):
    """No order with exactly this name."""

    def __init__(self, order_name: str):
        super().__init__(f"Order not found: {order_name}", status_code=None)
        self.order_name = order_name


class OrderResolver:
    """Resolves order numbers against Shopify through a rate-limited client."""

    def __init__(self, client: ShopifyClient):
        self.client = client

    async def find_order_by_name(self, order_name: str) -> OrderRecord:
        """
        Look up an order by its display name (e.g. "C#1234").

        The name filter on /orders.json is a prefix match on some shops, so
        the first candidate with an exactly equal name wins.
        """
        data = await self.client.get(
            "/orders.json",
            params={"name": order_name, "status": "any"},
        )
        for order in data.get("orders") or []:
            if order.get("name") == order_name:
                return OrderRecord(id=order["id"], name=order["name"])
        raise OrderNotFoundError(order_name)

    async def fetch_order_metafields(self, order_id) -> Dict[str, str]:
        """Return the order's metafields as {"namespace.key": value}."""
        data = await self.client.get(f"/orders/{order_id}/metafields.json")

        attributes: Dict[str, str] = {}
        for metafield in data.get("metafields") or []:
            namespace = str(metafield.get("namespace") or "").strip()
            key = str(metafield.get("key") or "").strip()
            value = metafield.get("value")
            if namespace and key:
                attributes[f"{namespace}.{key}"] = "" if value is None else str(value)

        logger.debug(f"Order {order_id}: {len(attributes)} metafields")
        return attributes
