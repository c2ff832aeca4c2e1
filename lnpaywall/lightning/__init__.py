"""
Lightning payment verification.

Provides the verifier protocol, the lnd client implementing it and helpers for
deriving payment hashes from preimages.
"""

from lnpaywall.lightning.base import PaymentVerifier
from lnpaywall.lightning.lnd import LNDClient
from lnpaywall.lightning.proof import decode_proof, encode_proof, payment_hash, replay_key

__all__ = [
    "PaymentVerifier",
    "LNDClient",
    "decode_proof",
    "encode_proof",
    "payment_hash",
    "replay_key",
]
