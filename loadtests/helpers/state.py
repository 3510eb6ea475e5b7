"""Per-user state tracking for Locust load test scenarios.

Each Locust user instance keeps its own state. It tracks the ids returned by
creation endpoints so follow-up requests can reference them.
"""

from dataclasses import dataclass, field


@dataclass
class ShopperState:
    """Tracks one simulated shopper from browsing to payment."""

    user_id: str
    product_ids: list[str] = field(default_factory=list)
    order_id: str | None = None
    transaction_id: str | None = None
    reference: str | None = None


@dataclass
class ContentionState:
    """Tracks the outcome counts for buyers competing over one product."""

    placed: int = 0
    sold_out: int = 0
