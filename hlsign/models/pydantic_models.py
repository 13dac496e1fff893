"""
Pydantic models for request/response validation
"""
from typing import Any, Dict, Optional, Union, Literal
from pydantic import BaseModel, Field, field_validator


def _check_address(v: str, label: str) -> str:
    if not v.startswith('0x'):
        raise ValueError(f'{label} must start with 0x')
    if len(v) != 42:
        raise ValueError(f'{label} must be 42 characters long')
    return v.lower()


def _check_private_key(v: str) -> str:
    # Remove 0x prefix if present
    if v.startswith('0x'):
        v = v[2:]
    if len(v) != 64:
        raise ValueError('Private key must be 64 characters long (32 bytes)')
    return v


class SigningCredentials(BaseModel):
    """Wallet credentials, supplied per request and never stored"""

    wallet_address: Optional[str] = Field(None, min_length=42, max_length=42, description="Expected signer address")
    private_key: str = Field(..., min_length=64, max_length=66, description="Private key for signing")
    vault_address: Optional[str] = Field(None, description="Vault or sub-account address if applicable")

    @field_validator('wallet_address')
    @classmethod
    def validate_wallet_address(cls, v):
        if v is not None:
            return _check_address(v, 'Wallet address')
        return v

    @field_validator('private_key')
    @classmethod
    def validate_private_key(cls, v):
        return _check_private_key(v)

    @field_validator('vault_address')
    @classmethod
    def validate_vault_address(cls, v):
        if v is not None:
            return _check_address(v, 'Vault address')
        return v


class OrderRequest(SigningCredentials):
    """Request model for order signing"""

    wallet_address: str = Field(..., min_length=42, max_length=42, description="Ethereum wallet address")

    # Order parameters
    asset_index: int = Field(..., ge=0, description="Asset index for the perpetual")
    is_buy: bool = Field(..., description="True for buy/long, False for sell/short")
    price: Union[str, float] = Field(..., description="Limit price for the order")
    size: Union[str, float] = Field(..., description="Order size")
    reduce_only: bool = Field(False, description="Whether this is a reduce-only order")

    # Order type
    order_type: Literal["limit", "trigger"] = Field("limit", description="Order type")
    time_in_force: Literal["Gtc", "Ioc", "Alo"] = Field("Ioc", description="Time in force")
    trigger_price: Optional[Union[str, float]] = Field(None, description="Trigger price for trigger orders")
    is_market: bool = Field(True, description="Execute as market once triggered")
    tpsl: Literal["tp", "sl"] = Field("sl", description="Take profit or stop loss trigger")
    cloid: Optional[str] = Field(None, description="Client order id, 0x-prefixed 16 bytes")

    # Optional parameters
    expires_after: Optional[int] = Field(None, ge=0, description="Expiration timestamp")


class CancelOrderRequest(SigningCredentials):
    """Request model for cancel order signing"""

    wallet_address: str = Field(..., min_length=42, max_length=42, description="Ethereum wallet address")

    asset_index: int = Field(..., ge=0, description="Asset index for the perpetual")
    order_id: int = Field(..., ge=0, description="Order ID to cancel")


class ActionSignRequest(SigningCredentials):
    """Request model for signing an arbitrary L1 action"""

    action: Dict[str, Any] = Field(..., description="Action object exactly as it will be submitted")
    nonce: Optional[int] = Field(None, ge=0, description="Nonce, defaults to current time in ms")
    expires_after: Optional[int] = Field(None, ge=0, description="Expiration timestamp")


class ActionHashRequest(BaseModel):
    """Request model for computing an action hash"""

    action: Dict[str, Any] = Field(..., description="Action object")
    nonce: int = Field(..., ge=0, description="Nonce used for signing")
    vault_address: Optional[str] = Field(None, description="Vault address if applicable")
    expires_after: Optional[int] = Field(None, ge=0, description="Expiration timestamp")

    @field_validator('vault_address')
    @classmethod
    def validate_vault_address(cls, v):
        if v is not None:
            return _check_address(v, 'Vault address')
        return v


class VerifySignatureRequest(ActionHashRequest):
    """Request model for signature recovery"""

    signature: Dict[str, Any] = Field(..., description="Signature components (r, s, v)")
    wallet_address: str = Field(..., min_length=42, max_length=42, description="Expected signer address")

    @field_validator('wallet_address')
    @classmethod
    def validate_wallet_address(cls, v):
        return _check_address(v, 'Wallet address')

    @field_validator('signature')
    @classmethod
    def validate_signature(cls, v):
        missing = [k for k in ("r", "s", "v") if k not in v]
        if missing:
            raise ValueError(f"Signature missing fields: {', '.join(missing)}")
        return v


class SignatureResponse(BaseModel):
    """Response model for signed transactions"""

    success: bool = Field(..., description="Whether signing was successful")
    signature: Optional[dict] = Field(None, description="Signature components (r, s, v)")
    order_request: Optional[dict] = Field(None, description="Complete request body for the Hyperliquid exchange API")
    wallet_address: Optional[str] = Field(None, description="Address that signed the request")
    connection_id: Optional[str] = Field(None, description="Action hash signed through the phantom agent")
    error: Optional[str] = Field(None, description="Error message if signing failed")

    model_config = {
        "json_schema_extra": {
            "example": {
                "success": True,
                "signature": {
                    "r": "0x...",
                    "s": "0x...",
                    "v": 27
                },
                "order_request": {
                    "action": {},
                    "nonce": 1234567890,
                    "signature": {},
                    "vaultAddress": None
                }
            }
        }
    }


class ActionHashResponse(BaseModel):
    """Action hash response"""

    connection_id: str = Field(..., description="keccak256 action hash, 0x-prefixed")
    source: str = Field(..., description="Phantom agent source for the configured network")


class VerifySignatureResponse(BaseModel):
    """Signature verification response"""

    success: bool = Field(True, description="Whether recovery ran")
    valid: bool = Field(..., description="Recovered address equals the expected address")
    wallet_address: str = Field(..., description="Expected signer address")
    recovered_address: str = Field(..., description="Address recovered from the signature")


class HealthResponse(BaseModel):
    """Health check response"""

    status: str = Field("healthy", description="Service health status")
    version: str = Field("1.0.0", description="Service version")
    environment: str = Field(..., description="Current environment")
    hyperliquid_testnet: bool = Field(..., description="Whether using Hyperliquid testnet")


class ErrorResponse(BaseModel):
    """Error response model"""

    success: bool = Field(False, description="Always false for errors")
    error: str = Field(..., description="Error message")
    code: Optional[str] = Field(None, description="Error code for programmatic handling")
    details: Optional[dict] = Field(None, description="Additional error details")
