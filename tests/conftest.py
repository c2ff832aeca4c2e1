"""Shared pytest fixtures for lnpaywall tests."""

import hashlib
import os
import threading
import time

import pytest

from lnpaywall.errors import ChargeNotFound, InvalidAmount, VerificationUnavailable
from lnpaywall.lightning.proof import decode_proof, encode_proof
from lnpaywall.paywall import Authorizer, ChargeConfig
from lnpaywall.storage import MemoryReplayStore


class FakeLightning:
    """In-process stand-in for a Lightning node.

    Every issued invoice gets a random preimage; tests look it up through
    ``proof_for`` and flip it to settled with ``settle``.
    """

    def __init__(self, settle_delay: float = 0.0):
        self.settle_delay = settle_delay
        self.unavailable = False
        self.issued = []
        self._invoices = {}
        self._proofs = {}
        self._lock = threading.Lock()
        self.settlement_checks = 0

    def issue_charge(self, amount, memo):
        if amount <= 0:
            raise InvalidAmount(f"Amount must be positive, got {amount}")
        if self.unavailable:
            raise VerificationUnavailable("node offline")
        preimage = os.urandom(32)
        hash_hex = hashlib.sha256(preimage).hexdigest()
        payment_request = f"lnbcrt{amount}n1{hash_hex[:20]}"
        with self._lock:
            self._invoices[hash_hex] = False
            self._proofs[payment_request] = encode_proof(preimage)
            self.issued.append((payment_request, amount, memo))
        return payment_request

    def is_settled(self, proof):
        hash_hex = hashlib.sha256(decode_proof(proof)).hexdigest()
        with self._lock:
            self.settlement_checks += 1
        if self.unavailable:
            raise VerificationUnavailable("node offline")
        if self.settle_delay:
            time.sleep(self.settle_delay)
        with self._lock:
            if hash_hex not in self._invoices:
                raise ChargeNotFound("unable to locate invoice")
            return self._invoices[hash_hex]

    def proof_for(self, payment_request):
        return self._proofs[payment_request]

    def settle(self, proof):
        hash_hex = hashlib.sha256(decode_proof(proof)).hexdigest()
        with self._lock:
            self._invoices[hash_hex] = True


@pytest.fixture
def lightning():
    return FakeLightning()


@pytest.fixture
def store():
    return MemoryReplayStore()


@pytest.fixture
def authorizer(lightning, store):
    return Authorizer(lightning, store)


@pytest.fixture
def charge():
    return ChargeConfig(amount=100, memo="api-call")


@pytest.fixture
def settled_proof(lightning, charge):
    """A preimage whose invoice has been paid but never presented."""
    payment_request = lightning.issue_charge(charge.amount, charge.memo)
    proof = lightning.proof_for(payment_request)
    lightning.settle(proof)
    return proof


@pytest.fixture
def macaroon_file(tmp_path):
    path = tmp_path / "invoice.macaroon"
    path.write_bytes(b"\x02\x01\xab")
    return path
