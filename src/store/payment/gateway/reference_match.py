"""Stub verifier: a payment is approved when the submitted reference matches.

Stands in for a real provider until one is integrated. It keeps no state, so a
single instance serves the whole process.
"""

from store.payment.gateway.port import PaymentVerifier, VerificationResult


class ReferenceMatchVerifier(PaymentVerifier):
    def verify(
        self,
        reference: str,
        submitted_reference: str,
        amount: float,
        payment_data: str | None,
    ) -> VerificationResult:
        if submitted_reference == reference:
            return VerificationResult(approved=True)
        return VerificationResult(approved=False, reason="Reference does not match")
