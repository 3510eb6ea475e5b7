"""Where payment handlers find the verifier to settle transactions with.

A process-wide ``ReferenceMatchVerifier`` answers unless another verifier
has been installed with ``set_verifier``.
"""

from store.payment.gateway.port import PaymentVerifier, VerificationResult
from store.payment.gateway.reference_match import ReferenceMatchVerifier

__all__ = [
    "PaymentVerifier",
    "ReferenceMatchVerifier",
    "VerificationResult",
    "get_verifier",
    "reset_verifier",
    "set_verifier",
]

_default = ReferenceMatchVerifier()
_installed: PaymentVerifier | None = None


def get_verifier() -> PaymentVerifier:
    return _installed if _installed is not None else _default


def set_verifier(verifier: PaymentVerifier) -> None:
    global _installed
    _installed = verifier


def reset_verifier() -> None:
    set_verifier(None)
