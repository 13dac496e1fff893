"""Models for the Hyperliquid signing service"""
from .pydantic_models import (
    SigningCredentials,
    OrderRequest,
    CancelOrderRequest,
    ActionSignRequest,
    ActionHashRequest,
    VerifySignatureRequest,
    SignatureResponse,
    ActionHashResponse,
    VerifySignatureResponse,
    HealthResponse,
    ErrorResponse
)

__all__ = [
    "SigningCredentials",
    "OrderRequest",
    "CancelOrderRequest",
    "ActionSignRequest",
    "ActionHashRequest",
    "VerifySignatureRequest",
    "SignatureResponse",
    "ActionHashResponse",
    "VerifySignatureResponse",
    "HealthResponse",
    "ErrorResponse"
]
