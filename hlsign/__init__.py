"""Hyperliquid L1 action serialization and signing"""
from hlsign.services.serializer import CanonicalSerializer, EncodingError, serialize
from hlsign.services.action_signer import (
    Signature,
    SignedRequest,
    SignatureMismatchError,
    compute_action_hash,
    construct_phantom_agent,
    recover_signer,
    sign_action,
    verify_signature,
)

__version__ = "1.0.0"

__all__ = [
    "CanonicalSerializer",
    "EncodingError",
    "serialize",
    "Signature",
    "SignedRequest",
    "SignatureMismatchError",
    "compute_action_hash",
    "construct_phantom_agent",
    "recover_signer",
    "sign_action",
    "verify_signature",
]
