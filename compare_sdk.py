#!/usr/bin/env python3
"""
Compare local signing with the official Hyperliquid SDK for a given key
"""
import json
import time

from eth_account import Account
from hyperliquid.utils.signing import action_hash, sign_l1_action

from hlsign.services.action_signer import compute_action_hash, recover_signer, sign_action

REFERENCE_CONNECTION_ID = "0x0fcbeda5ae3c4950a548021552a4fea2226858c4453571bf3f24ba017eac2908"
REFERENCE_NONCE = 1677777606040
REFERENCE_ACTION = {
    "type": "order",
    "orders": [{
        "a": 4,
        "b": True,
        "p": "1670.1",
        "s": "0.0147",
        "r": False,
        "t": {"limit": {"tif": "Ioc"}}
    }],
    "grouping": "na"
}


def compare(wallet, action, nonce, vault_address=None, expires_after=None, is_mainnet=True):
    ours = sign_action(action, wallet, vault_address, nonce, expires_after, is_mainnet)
    sdk = sign_l1_action(wallet, action, vault_address, nonce, expires_after, is_mainnet)

    local_hash = compute_action_hash(action, vault_address, nonce, expires_after)
    sdk_hash = action_hash(action, vault_address, nonce, expires_after)
    recovered = recover_signer(action, ours.signature, vault_address, nonce, expires_after, is_mainnet)

    print(f"Nonce: {nonce}  vault: {vault_address}  mainnet: {is_mainnet}")
    print(f"  connectionId local: 0x{local_hash.hex()}")
    print(f"  connectionId sdk:   0x{sdk_hash.hex()}")
    print(f"  signature local: {ours.signature.to_dict()}")
    print(f"  signature sdk:   {sdk}")
    print(f"  recovered: {recovered}  match: {recovered.lower() == wallet.address.lower()}")
    v, r, s = ours.signature.vrs()
    same = (int(sdk["r"], 16), int(sdk["s"], 16), sdk["v"]) == (r, s, v)
    print(f"  identical to sdk: {local_hash == sdk_hash and same}")
    return ours


def main():
    print("Reference vector check...")
    connection_id = "0x" + compute_action_hash(REFERENCE_ACTION, None, REFERENCE_NONCE).hex()
    print(f"  expected: {REFERENCE_CONNECTION_ID}")
    print(f"  got:      {connection_id}")
    print(f"  match: {connection_id == REFERENCE_CONNECTION_ID}")

    private_key = input("\nEnter a private key to compare signatures (blank for a fresh one): ").strip()
    if private_key:
        if not private_key.startswith('0x'):
            private_key = '0x' + private_key
        wallet = Account.from_key(private_key)
    else:
        wallet = Account.create()
    print(f"Wallet address: {wallet.address}\n")

    compare(wallet, REFERENCE_ACTION, REFERENCE_NONCE, is_mainnet=False)
    signed = compare(wallet, REFERENCE_ACTION, int(time.time() * 1000),
                     vault_address="0x0000000000000000000000000000000000000001")

    print("\nComplete request body:")
    print(json.dumps(signed.to_payload(), indent=2))


if __name__ == "__main__":
    main()
