"""
Builders for Hyperliquid order and cancel actions

Field order in the produced dicts matters: the action hash serializes maps
in insertion order, so actions are always built in the exchange's layout.
"""
import logging
from typing import Any, Dict, Iterable, List, Optional

from hyperliquid.utils.signing import order_request_to_order_wire
from hyperliquid.utils.types import Cloid

from hlsign.services.action_signer import load_wallet

logger = logging.getLogger(__name__)

TIME_IN_FORCE = ("Alo", "Ioc", "Gtc")
TPSL = ("tp", "sl")


def limit_order_type(tif: str = "Gtc") -> Dict[str, Any]:
    if tif not in TIME_IN_FORCE:
        raise ValueError(f"Unknown time in force: {tif}")
    return {"limit": {"tif": tif}}


def trigger_order_type(trigger_price: float, is_market: bool, tpsl: str) -> Dict[str, Any]:
    if tpsl not in TPSL:
        raise ValueError(f"Unknown tpsl: {tpsl}")
    return {"trigger": {"triggerPx": float(trigger_price), "isMarket": is_market, "tpsl": tpsl}}


def build_order_wire(asset: int, is_buy: bool, size: float, price: float,
                     reduce_only: bool = False, order_type: Optional[Dict[str, Any]] = None,
                     cloid: Optional[str] = None) -> Dict[str, Any]:
    """
    Convert order parameters to the wire layout {"a", "b", "p", "s", "r", "t"[, "c"]}.

    Price and size become decimal strings; a value that would need rounding
    beyond 8 decimals raises ValueError.
    """
    if asset < 0:
        raise ValueError(f"Asset index must be non-negative: {asset}")
    if order_type is None:
        order_type = limit_order_type()
    if cloid is not None:
        try:
            cloid = Cloid.from_str(cloid)
        except (TypeError, ValueError) as e:
            raise ValueError(f"Invalid cloid {cloid!r}: {e}") from e

    order_request = {
        "coin": f"ASSET_{asset}",
        "is_buy": is_buy,
        "sz": float(size),
        "limit_px": float(price),
        "order_type": order_type,
        "reduce_only": reduce_only,
        "cloid": cloid,
    }
    order_wire = order_request_to_order_wire(order_request, asset)
    logger.debug(f"Built order wire for asset {asset}: {order_wire}")
    return order_wire


def build_order_action(orders: Iterable[Dict[str, Any]], grouping: str = "na") -> Dict[str, Any]:
    orders = list(orders)
    if not orders:
        raise ValueError("An order action needs at least one order")
    return {"type": "order", "orders": orders, "grouping": grouping}


def build_cancel_action(cancels: Iterable[Dict[str, int]]) -> Dict[str, Any]:
    """cancels: iterable of {"a": asset index, "o": order id}"""
    wires = [{"a": int(c["a"]), "o": int(c["o"])} for c in cancels]
    if not wires:
        raise ValueError("A cancel action needs at least one order id")
    return {"type": "cancel", "cancels": wires}


def check_wallet_matches(private_key: str, expected_address: str) -> str:
    """Derive the wallet address from a key and compare it with ``expected_address``"""
    wallet = load_wallet(private_key)
    if wallet.address.lower() != expected_address.lower():
        raise ValueError(f"Private key does not match wallet address. "
                         f"Expected: {expected_address.lower()}, "
                         f"Got: {wallet.address.lower()}")
    return wallet.address


def validate_order_payload(payload: Dict[str, Any]) -> List[str]:
    """Structural checks on a signed request body before it is handed out"""
    errors: List[str] = []

    action = payload.get("action")
    if not action:
        errors.append("Missing action field")
    if payload.get("nonce") is None:
        errors.append("Missing nonce field")
    signature = payload.get("signature")
    if not signature:
        errors.append("Missing signature field")

    if isinstance(action, dict):
        action_type = action.get("type")
        if not action_type:
            errors.append("Missing action.type")
        if action_type == "order":
            if not action.get("grouping"):
                errors.append("Missing action.grouping")
            orders = action.get("orders")
            if not isinstance(orders, list) or not orders:
                errors.append("Missing action.orders")
            else:
                for index, order in enumerate(orders):
                    errors.extend(_order_errors(index, order))
        elif action_type == "cancel":
            cancels = action.get("cancels")
            if not isinstance(cancels, list) or not cancels:
                errors.append("Missing action.cancels")

    if isinstance(signature, dict):
        if not signature.get("r"):
            errors.append("Missing signature.r")
        if not signature.get("s"):
            errors.append("Missing signature.s")
        v = signature.get("v")
        if isinstance(v, bool) or not isinstance(v, int):
            errors.append("Missing or invalid signature.v")

    return errors


def _order_errors(index: int, order: Any) -> List[str]:
    if not isinstance(order, dict):
        return [f"Order {index}: must be an object"]
    errors = []
    a = order.get("a")
    if isinstance(a, bool) or not isinstance(a, int):
        errors.append(f"Order {index}: asset (a) must be number")
    if not isinstance(order.get("b"), bool):
        errors.append(f"Order {index}: isBuy (b) must be boolean")
    # price and size travel as strings on the wire
    if not isinstance(order.get("p"), str):
        errors.append(f"Order {index}: price (p) must be string")
    if not isinstance(order.get("s"), str):
        errors.append(f"Order {index}: size (s) must be string")
    if not isinstance(order.get("r"), bool):
        errors.append(f"Order {index}: reduceOnly (r) must be boolean")
    if not order.get("t"):
        errors.append(f"Order {index}: missing type (t) field")
    return errors
