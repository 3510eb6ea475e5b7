"""Payment verification port (abstract interface).

The store never talks to a payment provider directly. Verification goes
through this port so a real provider adapter can replace the stub without
touching the domain or the handlers.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class VerificationResult:
    """Outcome of checking a submitted payment against a transaction."""

    approved: bool
    reason: str | None = None


class PaymentVerifier(ABC):
    """Abstract payment verification interface."""

    @abstractmethod
    def verify(
        self,
        reference: str,
        submitted_reference: str,
        amount: float,
        payment_data: str | None,
    ) -> VerificationResult:
        """Decide whether the submitted payment settles the transaction."""
        ...
