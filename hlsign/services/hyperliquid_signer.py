"""
Hyperliquid signing service built on the local action signer
"""
from typing import Optional, Dict, Any
from hlsign.models import OrderRequest, CancelOrderRequest, ActionSignRequest
from hlsign.services.action_signer import (
    MAINNET_SOURCE,
    TESTNET_SOURCE,
    SignedRequest,
    compute_action_hash,
    load_wallet,
    recover_signer,
    sign_action,
)
from hlsign.services.order_builder import (
    build_cancel_action,
    build_order_action,
    build_order_wire,
    check_wallet_matches,
    limit_order_type,
    trigger_order_type,
    validate_order_payload,
)
import logging

logger = logging.getLogger(__name__)


class HyperliquidSigner:
    """Signs Hyperliquid L1 actions. Credentials are passed per call and never kept."""

    def __init__(self, is_testnet: bool = True, verify_signatures: bool = True):
        self.is_testnet = is_testnet
        self.verify_signatures = verify_signatures
        logger.info(f"Initialized HyperliquidSigner (testnet: {is_testnet})")

    @property
    def is_mainnet(self) -> bool:
        return not self.is_testnet

    @property
    def source(self) -> str:
        return MAINNET_SOURCE if self.is_mainnet else TESTNET_SOURCE

    def create_order_wire(self, order_req: OrderRequest) -> Dict[str, Any]:
        """Convert OrderRequest to Hyperliquid order wire format"""

        if order_req.order_type == "trigger":
            if order_req.trigger_price is None:
                raise ValueError("trigger_price is required for trigger orders")
            order_type = trigger_order_type(float(order_req.trigger_price), order_req.is_market, order_req.tpsl)
        else:
            order_type = limit_order_type(order_req.time_in_force)

        order_wire = build_order_wire(
            asset=order_req.asset_index,
            is_buy=order_req.is_buy,
            size=float(order_req.size),
            price=float(order_req.price),
            reduce_only=order_req.reduce_only,
            order_type=order_type,
            cloid=order_req.cloid,
        )

        logger.debug(f"Created order wire: {order_wire}")
        return order_wire

    def create_order_action(self, order_req: OrderRequest) -> Dict[str, Any]:
        """Create the complete order action"""

        action = build_order_action([self.create_order_wire(order_req)])
        logger.debug(f"Created order action: {action}")
        return action

    def sign(self, action: Dict[str, Any], private_key: str,
             vault_address: Optional[str] = None, nonce: Optional[int] = None,
             expires_after: Optional[int] = None) -> SignedRequest:
        """Sign any L1 action on the configured network"""

        signed = sign_action(
            action,
            private_key,
            vault_address=vault_address,
            nonce=nonce,
            expires_after=expires_after,
            is_mainnet=self.is_mainnet,
            verify=self.verify_signatures,
        )
        logger.info(f"Signed {action.get('type', 'unknown')} action (nonce={signed.nonce}, "
                    f"vault={vault_address}, testnet={self.is_testnet})")
        return signed

    def _result(self, signed: SignedRequest, wallet_address: str,
                check_structure: bool = False) -> Dict[str, Any]:
        """Build the response dict; order and cancel requests are also structure checked"""
        order_request = signed.to_payload()
        if check_structure:
            errors = validate_order_payload(order_request)
            if errors:
                raise ValueError(f"Invalid signed request: {'; '.join(errors)}")

        connection_id = compute_action_hash(
            signed.action, signed.vault_address, signed.nonce, signed.expires_after
        )
        return {
            "success": True,
            "signature": signed.signature.to_dict(),
            "order_request": order_request,
            "wallet_address": wallet_address,
            "nonce": signed.nonce,
            "connection_id": "0x" + connection_id.hex(),
        }

    def sign_order(self, order_req: OrderRequest) -> Dict[str, Any]:
        """
        Sign a Hyperliquid order

        Args:
            order_req: OrderRequest containing all order details

        Returns:
            Dict containing signature and complete order request
        """
        wallet_address = check_wallet_matches(order_req.private_key, order_req.wallet_address)
        logger.info(f"Signing order for wallet: {wallet_address}")

        action = self.create_order_action(order_req)
        signed = self.sign(
            action,
            order_req.private_key,
            vault_address=order_req.vault_address,
            expires_after=order_req.expires_after,
        )
        logger.info("Order signed successfully")
        return self._result(signed, wallet_address, check_structure=True)

    def sign_cancel_order(self, cancel_req: CancelOrderRequest) -> Dict[str, Any]:
        """
        Sign a cancel order request

        Args:
            cancel_req: CancelOrderRequest containing cancel parameters and wallet info

        Returns:
            Dict containing signature and complete cancel request
        """
        wallet_address = check_wallet_matches(cancel_req.private_key, cancel_req.wallet_address)
        logger.info(f"Starting cancel order signing for {wallet_address}")

        cancel_action = build_cancel_action([{"a": cancel_req.asset_index, "o": cancel_req.order_id}])
        signed = self.sign(cancel_action, cancel_req.private_key, vault_address=cancel_req.vault_address)
        logger.info("Cancel order signed successfully")
        return self._result(signed, wallet_address, check_structure=True)

    def sign_action_request(self, action_req: ActionSignRequest) -> Dict[str, Any]:
        """Sign an arbitrary action supplied by the caller"""

        if action_req.wallet_address is not None:
            wallet_address = check_wallet_matches(action_req.private_key, action_req.wallet_address)
        else:
            wallet_address = load_wallet(action_req.private_key).address

        signed = self.sign(
            action_req.action,
            action_req.private_key,
            vault_address=action_req.vault_address,
            nonce=action_req.nonce,
            expires_after=action_req.expires_after,
        )
        return self._result(signed, wallet_address)

    def action_hash(self, action: Dict[str, Any], nonce: int,
                    vault_address: Optional[str] = None,
                    expires_after: Optional[int] = None) -> str:
        return "0x" + compute_action_hash(action, vault_address, nonce, expires_after).hex()

    def verify_signature(self, action: Dict[str, Any], signature: Dict[str, Any],
                         wallet_address: str, nonce: int,
                         vault_address: Optional[str] = None,
                         expires_after: Optional[int] = None) -> Dict[str, Any]:
        """
        Recover the signer of an action and compare it with ``wallet_address``

        Returns:
            Dict with the recovered address and whether it matches
        """
        recovered = recover_signer(action, signature, vault_address, nonce, expires_after, self.is_mainnet)
        valid = recovered.lower() == wallet_address.lower()
        logger.info(f"Signature verification - Expected: {wallet_address}, Recovered: {recovered}")
        return {
            "success": True,
            "valid": valid,
            "wallet_address": wallet_address,
            "recovered_address": recovered,
        }
