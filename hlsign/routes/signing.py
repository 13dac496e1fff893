"""
Signing API routes
"""
from fastapi import APIRouter, HTTPException, status
from hlsign.models import (
    OrderRequest,
    CancelOrderRequest,
    ActionSignRequest,
    ActionHashRequest,
    VerifySignatureRequest,
    SignatureResponse,
    ActionHashResponse,
    VerifySignatureResponse,
    ErrorResponse
)
from hlsign.services.action_signer import SignatureMismatchError
from hlsign.services.hyperliquid_signer import HyperliquidSigner
from hlsign.services.serializer import EncodingError
from hlsign.config import settings
import logging

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1", tags=["signing"])

# Initialize the signer
signer = HyperliquidSigner(
    is_testnet=settings.hyperliquid_testnet,
    verify_signatures=settings.verify_signatures
)

ERROR_RESPONSES = {
    400: {"model": ErrorResponse, "description": "Invalid request"},
    500: {"model": ErrorResponse, "description": "Signing failed"}
}


def _raise_http_error(label: str, e: Exception):
    """Translate signing failures into HTTP errors"""
    if isinstance(e, SignatureMismatchError):
        # Recovered address differs from the signer: a hashing bug, not bad input
        logger.error(f"{label} signature mismatch: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"{label} failed: {str(e)}"
        )
    if isinstance(e, EncodingError):
        logger.error(f"{label} encoding error: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Unsupported action: {str(e)}"
        )
    if isinstance(e, ValueError):
        logger.error(f"{label} value error: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid request: {str(e)}"
        )
    logger.error(f"{label} unexpected error: {str(e)}")
    raise HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail=f"{label} internal server error: {str(e)}"
    )


def _signature_response(result: dict) -> SignatureResponse:
    return SignatureResponse(
        success=True,
        signature=result["signature"],
        order_request=result["order_request"],
        wallet_address=result["wallet_address"],
        connection_id=result["connection_id"]
    )


@router.post(
    "/sign-action",
    response_model=SignatureResponse,
    responses=ERROR_RESPONSES,
    summary="Sign L1 Action",
    description="Signs an arbitrary Hyperliquid L1 action"
)
async def sign_action(action_request: ActionSignRequest) -> SignatureResponse:
    """
    Sign any exchange action.

    The action is hashed exactly as given, so its key order must match the
    order in which it will be submitted.
    """
    try:
        logger.info(f"Signing {action_request.action.get('type', 'unknown')} action")
        result = signer.sign_action_request(action_request)
        return _signature_response(result)
    except Exception as e:
        _raise_http_error("Signing", e)


@router.post(
    "/sign-order",
    response_model=SignatureResponse,
    responses=ERROR_RESPONSES,
    summary="Sign Hyperliquid Order",
    description="Signs a Hyperliquid perpetual order"
)
async def sign_order(order_request: OrderRequest) -> SignatureResponse:
    """
    Sign a Hyperliquid order transaction.

    This endpoint accepts order parameters and returns a signed transaction
    that can be submitted directly to the Hyperliquid exchange API.
    """
    try:
        logger.info(f"Signing order for wallet: {order_request.wallet_address}")
        logger.debug(f"Order details: asset={order_request.asset_index}, "
                     f"is_buy={order_request.is_buy}, price={order_request.price}, "
                     f"size={order_request.size}")
        result = signer.sign_order(order_request)
        logger.info(f"Order signed successfully for {order_request.wallet_address}")
        return _signature_response(result)
    except Exception as e:
        _raise_http_error("Signing", e)


@router.post(
    "/cancel-order",
    response_model=SignatureResponse,
    responses=ERROR_RESPONSES,
    summary="Cancel Hyperliquid Order",
    description="Signs a cancel order request"
)
async def cancel_order(cancel_request: CancelOrderRequest) -> SignatureResponse:
    """
    Cancel a Hyperliquid order.

    This endpoint accepts cancel parameters and returns a signed transaction
    that can be submitted directly to the Hyperliquid exchange API.
    """
    try:
        logger.info(f"Cancelling order for wallet: {cancel_request.wallet_address}")
        logger.debug(f"Cancel details: asset={cancel_request.asset_index}, "
                     f"order_id={cancel_request.order_id}")
        result = signer.sign_cancel_order(cancel_request)
        logger.info(f"Cancel order signed successfully for {cancel_request.wallet_address}")
        return _signature_response(result)
    except Exception as e:
        _raise_http_error("Cancel", e)


@router.post(
    "/action-hash",
    response_model=ActionHashResponse,
    responses={400: {"model": ErrorResponse, "description": "Invalid request"}},
    summary="Compute Action Hash",
    description="Computes the connection id an action would be signed under"
)
async def action_hash(hash_request: ActionHashRequest) -> ActionHashResponse:
    try:
        connection_id = signer.action_hash(
            hash_request.action,
            hash_request.nonce,
            vault_address=hash_request.vault_address,
            expires_after=hash_request.expires_after
        )
        return ActionHashResponse(connection_id=connection_id, source=signer.source)
    except Exception as e:
        _raise_http_error("Action hash", e)


@router.post(
    "/verify-signature",
    response_model=VerifySignatureResponse,
    responses=ERROR_RESPONSES,
    summary="Verify Signature",
    description="Recover the signer of an action and compare it with the expected address"
)
async def verify_signature(verify_request: VerifySignatureRequest) -> VerifySignatureResponse:
    try:
        result = signer.verify_signature(
            action=verify_request.action,
            signature=verify_request.signature,
            wallet_address=verify_request.wallet_address,
            nonce=verify_request.nonce,
            vault_address=verify_request.vault_address,
            expires_after=verify_request.expires_after
        )
        return VerifySignatureResponse(**result)
    except Exception as e:
        _raise_http_error("Verification", e)
