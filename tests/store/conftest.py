import pytest
from protean.integrations.pytest import DomainFixture


@pytest.fixture(scope="session")
def store_bed():
    from store.domain import store

    bed = DomainFixture(store)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(scope="session", autouse=True)
def setup_db(store_bed):
    from store.domain import store
    from store.utils.db import drop_db, setup_db

    setup_db(store)

    yield

    drop_db(store)


@pytest.fixture(autouse=True)
def _ctx(store_bed):
    with store_bed.domain_context():
        yield

        from protean import current_domain

        for _, provider in current_domain.providers.items():
            provider._data_reset()

        current_domain.event_store.store._data_reset()


@pytest.fixture(autouse=True)
def _verifier():
    from store.payment.gateway import reset_verifier

    reset_verifier()
    yield
    reset_verifier()


@pytest.fixture()
def recording_verifier():
    """Reference-matching verifier that keeps every call, installed as the active one."""
    from store.payment.gateway import set_verifier
    from store.payment.gateway.reference_match import ReferenceMatchVerifier

    class RecordingVerifier(ReferenceMatchVerifier):
        def __init__(self):
            self.calls = []

        def verify(self, reference, submitted_reference, amount, payment_data):
            self.calls.append(
                {
                    "reference": reference,
                    "submitted_reference": submitted_reference,
                    "amount": amount,
                    "payment_data": payment_data,
                }
            )
            return super().verify(reference, submitted_reference, amount, payment_data)

    verifier = RecordingVerifier()
    set_verifier(verifier)
    return verifier
