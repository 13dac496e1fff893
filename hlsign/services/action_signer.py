"""
Hyperliquid L1 action signing

An action is hashed together with its nonce, optional vault address and
optional expiry, the hash is wrapped in an EIP-712 "Agent" struct (the
phantom agent) and that struct is signed with the wallet's secp256k1 key.
"""
import copy
import logging
import time
from dataclasses import dataclass
from typing import Any, Dict, Optional, Union

from eth_account import Account
from eth_account.messages import encode_typed_data
from eth_account.signers.local import LocalAccount
from eth_utils import is_hex_address, keccak, to_bytes

from hlsign.services.serializer import serialize

logger = logging.getLogger(__name__)

UINT64_MAX = 2 ** 64 - 1
ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"

MAINNET_SOURCE = "a"
TESTNET_SOURCE = "b"

EIP712_DOMAIN = {
    "chainId": 1337,
    "name": "Exchange",
    "verifyingContract": ZERO_ADDRESS,
    "version": "1",
}

EIP712_TYPES = {
    "Agent": [
        {"name": "source", "type": "string"},
        {"name": "connectionId", "type": "bytes32"},
    ],
    "EIP712Domain": [
        {"name": "name", "type": "string"},
        {"name": "version", "type": "string"},
        {"name": "chainId", "type": "uint256"},
        {"name": "verifyingContract", "type": "address"},
    ],
}


class SignatureMismatchError(ValueError):
    """Recovered signer differs from the signing wallet"""


@dataclass(frozen=True)
class Signature:
    r: str
    s: str
    v: int

    @classmethod
    def from_ints(cls, r: int, s: int, v: int) -> "Signature":
        return cls(r=_int_to_hex32(r), s=_int_to_hex32(s), v=v)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Signature":
        r, s, v = data["r"], data["s"], data["v"]
        if isinstance(r, str):
            r = int(r, 16)
        if isinstance(s, str):
            s = int(s, 16)
        return cls.from_ints(r, s, int(v))

    def to_dict(self) -> Dict[str, Any]:
        return {"r": self.r, "s": self.s, "v": self.v}

    def vrs(self):
        return self.v, int(self.r, 16), int(self.s, 16)


@dataclass(frozen=True)
class SignedRequest:
    """A signed action, ready to be posted to the exchange endpoint"""

    action: Any
    nonce: int
    signature: Signature
    vault_address: Optional[str] = None
    expires_after: Optional[int] = None

    def to_payload(self) -> Dict[str, Any]:
        payload = {
            "action": self.action,
            "nonce": self.nonce,
            "signature": self.signature.to_dict(),
            "vaultAddress": self.vault_address,
        }
        if self.expires_after is not None:
            payload["expiresAfter"] = self.expires_after
        return payload


def _int_to_hex32(value: int) -> str:
    if not 0 <= value < 2 ** 256:
        raise ValueError(f"Signature component out of range: {value}")
    return "0x" + value.to_bytes(32, "big").hex()


def _uint64_bytes(value: int, name: str) -> bytes:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"{name} must be an integer, got {type(value).__name__}")
    if not 0 <= value <= UINT64_MAX:
        raise ValueError(f"{name} must fit in an unsigned 64-bit integer: {value}")
    return value.to_bytes(8, "big")


def address_to_bytes(address: str) -> bytes:
    """Convert a 0x-prefixed 20 byte hex address to raw bytes"""
    if not isinstance(address, str) or not address.startswith("0x") or not is_hex_address(address):
        raise ValueError(f"Invalid address: {address!r}")
    return to_bytes(hexstr=address)


def get_timestamp_ms() -> int:
    return int(time.time() * 1000)


def compute_action_hash(action: Any, vault_address: Optional[str], nonce: int,
                        expires_after: Optional[int] = None) -> bytes:
    """
    Hash an action for L1 signing.

    Pre-image layout:
        serialize(action) | nonce (8 bytes BE) | 0x00
        serialize(action) | nonce (8 bytes BE) | 0x01 | vault address (20 bytes)
    followed by 0x00 | expires_after (8 bytes BE) only when an expiry is given.

    Maps are serialized in their own key order; the exchange rebuilds the
    pre-image from the decoded action in the same order.
    """
    data = bytearray(serialize(action, sort_keys=False))
    data += _uint64_bytes(nonce, "nonce")
    if vault_address is None:
        data += b"\x00"
    else:
        data += b"\x01"
        data += address_to_bytes(vault_address)
    if expires_after is not None:
        data += b"\x00"
        data += _uint64_bytes(expires_after, "expires_after")
    return keccak(bytes(data))


def construct_phantom_agent(action_hash: bytes, is_mainnet: bool) -> Dict[str, Any]:
    return {
        "source": MAINNET_SOURCE if is_mainnet else TESTNET_SOURCE,
        "connectionId": action_hash,
    }


def l1_payload(phantom_agent: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "domain": dict(EIP712_DOMAIN),
        "types": EIP712_TYPES,
        "primaryType": "Agent",
        "message": phantom_agent,
    }


def load_wallet(wallet: Union[str, LocalAccount]) -> LocalAccount:
    """Accept a hex private key (with or without 0x) or an existing account"""
    if isinstance(wallet, LocalAccount):
        return wallet
    if not isinstance(wallet, str):
        raise ValueError(f"Unsupported wallet type: {type(wallet).__name__}")
    private_key = wallet.strip()
    if not private_key.startswith("0x"):
        private_key = "0x" + private_key
    try:
        return Account.from_key(private_key)
    except Exception as e:
        raise ValueError(f"Invalid private key: {e}") from e


def recover_signer(action: Any, signature: Union[Signature, Dict[str, Any]],
                   vault_address: Optional[str], nonce: int,
                   expires_after: Optional[int] = None, is_mainnet: bool = True) -> str:
    """Recover the address that produced ``signature`` for this action"""
    if not isinstance(signature, Signature):
        signature = Signature.from_dict(signature)
    action_hash = compute_action_hash(action, vault_address, nonce, expires_after)
    structured_data = encode_typed_data(
        full_message=l1_payload(construct_phantom_agent(action_hash, is_mainnet))
    )
    return Account.recover_message(structured_data, vrs=signature.vrs())


def verify_signature(action: Any, signature: Union[Signature, Dict[str, Any]],
                     expected_address: str, vault_address: Optional[str], nonce: int,
                     expires_after: Optional[int] = None, is_mainnet: bool = True) -> bool:
    recovered = recover_signer(action, signature, vault_address, nonce, expires_after, is_mainnet)
    return recovered.lower() == expected_address.lower()


def sign_action(action: Any, wallet: Union[str, LocalAccount],
                vault_address: Optional[str] = None, nonce: Optional[int] = None,
                expires_after: Optional[int] = None, is_mainnet: bool = True,
                verify: bool = True) -> SignedRequest:
    """
    Sign an L1 action.

    Args:
        action: The action object, as it will be sent to the exchange
        wallet: Hex private key or eth_account LocalAccount
        vault_address: Vault or sub-account to act for, None for the wallet itself
        nonce: Millisecond timestamp; defaults to now
        expires_after: Optional expiry timestamp included in the hash
        is_mainnet: Selects the phantom agent source ("a" mainnet, "b" testnet)
        verify: Recover the signer and compare it with the wallet address

    Returns:
        SignedRequest with r, s, v and the inputs needed to submit it
    """
    account = load_wallet(wallet)
    if nonce is None:
        nonce = get_timestamp_ms()
    # the request must carry exactly what was hashed
    action = copy.deepcopy(action)

    action_hash = compute_action_hash(action, vault_address, nonce, expires_after)
    logger.debug(f"Action hash for {account.address} (nonce={nonce}): 0x{action_hash.hex()}")

    structured_data = encode_typed_data(
        full_message=l1_payload(construct_phantom_agent(action_hash, is_mainnet))
    )
    signed = account.sign_message(structured_data)
    signature = Signature.from_ints(signed.r, signed.s, signed.v)

    if verify:
        recovered = Account.recover_message(structured_data, vrs=signature.vrs())
        if recovered.lower() != account.address.lower():
            logger.error(f"SIGNATURE MISMATCH! Original: {account.address}, Recovered: {recovered}")
            raise SignatureMismatchError(
                f"Signature verification failed. Address mismatch: {account.address} vs {recovered}"
            )

    return SignedRequest(
        action=action,
        nonce=nonce,
        signature=signature,
        vault_address=vault_address,
        expires_after=expires_after,
    )
