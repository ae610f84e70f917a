import itertools

import pytest

from policypulse.backends import MemoryBackend
from policypulse.runtime import ProposalDraft, ProposalRepository
from policypulse.service import PolicyPulseService
from policypulse.signer import Signer
from policypulse.status import StatusBoard

ALICE = "0xA11CE00000000000000000000000000000000001"


class TickClock:
    """Deterministic clock: every call advances one second."""

    def __init__(self, start=1_700_000_000):
        self._it = itertools.count(start)
        self.now = start

    def __call__(self):
        self.now = next(self._it)
        return self.now


@pytest.fixture(scope="function")
def backend():
    return MemoryBackend()


@pytest.fixture(scope="function")
def signer():
    return Signer(address=ALICE)


@pytest.fixture(scope="function")
def repo(backend, signer):
    """Fresh repository per test, isolated in-memory backend"""
    return ProposalRepository(backend, signer=signer, clock=TickClock())


@pytest.fixture(scope="function")
def service(repo):
    return PolicyPulseService(repo, StatusBoard())


@pytest.fixture
def draft():
    return ProposalDraft(title="Schools", category="Education", content="Fund school lunches")
