"""
Helpers for turning a caller-supplied preimage into lookup keys.
"""

import base64
import binascii
import hashlib

from lnpaywall.errors import ProofMalformed

PREIMAGE_SIZE = 32


def decode_proof(proof: str) -> bytes:
    """Decode a base64 encoded preimage.

    Args:
        proof: Standard base64 text as sent by the caller

    Returns:
        The raw 32 byte preimage

    Raises:
        ProofMalformed: If the text is not strict base64 or has the wrong length
    """
    if not isinstance(proof, str) or not proof.strip():
        raise ProofMalformed("Preimage is empty")
    try:
        preimage = base64.b64decode(proof.strip(), validate=True)
    except (binascii.Error, ValueError) as exc:
        raise ProofMalformed(f"Preimage is not valid base64: {exc}") from exc
    if len(preimage) != PREIMAGE_SIZE:
        raise ProofMalformed(
            f"Preimage must be {PREIMAGE_SIZE} bytes, got {len(preimage)}"
        )
    return preimage


def encode_proof(preimage: bytes) -> str:
    """Encode a raw preimage the way clients send it."""
    return base64.b64encode(preimage).decode("ascii")


def payment_hash(preimage: bytes) -> bytes:
    return hashlib.sha256(preimage).digest()


def replay_key(proof: str) -> str:
    """Hex encoded payment hash for ``proof``, used as the replay store key."""
    return payment_hash(decode_proof(proof)).hex()
