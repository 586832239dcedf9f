"""User profile and two-factor tokens."""

from __future__ import annotations

from decimal import Decimal

from bpxclient.types.common import BpxModel, BpxPayload


class RequestTwoFactorPayload(BpxPayload):
    app: str | None = None
    email: str | None = None


class RequestTwoFactorResponse(BpxModel):
    signature: str


class UserPermissions(BpxModel):
    is_borrow_lend_enabled: bool
    is_crypto_deposit_enabled: bool
    is_crypto_withdrawal_enabled: bool
    is_fiat_deposit_enabled: bool
    is_fiat_withdrawal_enabled: bool
    is_perp_enabled: bool
    is_prediction_enabled: bool
    is_rfq_request_enabled: bool
    is_rfq_quote_enabled: bool
    is_spot_enabled: bool
    leverage_limit: Decimal


class User(BpxModel):
    id: int
    organization_id: int
    email: str
    first_name: str | None = None
    last_name: str | None = None
    country_code: str | None = None
    spot_fee_tier_id: int
    futures_fee_tier_id: int
    two_factor_verified: bool
    kyc_status: str
    user_type: str | None = None
    alias: str | None = None
    referrer_alias: str | None = None
    show_in_leaderboard: bool
    rewards_multiplier: Decimal
    kyc_approval_time: str | None = None
    alt_contact_platform: str | None = None
    alt_contact_info: str | None = None
    eu_kyc_session: str | None = None
    eu_kyc_session_trading: str | None = None
    is_safe_enabled: bool
    is_prediction_market_enabled: bool
    eu_claim_verified: bool
    subaccount_limit: int | None = None
    has_passkey: bool
    permissions: UserPermissions
    is_market_maker: bool | None = None
