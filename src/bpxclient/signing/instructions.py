"""
Instruction resolver.

Maps (HTTP method, path) to the instruction name the exchange expects inside
the signee. Routes missing from the table are sent unsigned; that covers the
public endpoints and any endpoint not yet listed here.
"""

from __future__ import annotations

from types import MappingProxyType
from urllib.parse import urlsplit

from bpxclient import routes

INSTRUCTIONS: MappingProxyType[tuple[str, str], str] = MappingProxyType(
    {
        ("GET", routes.API_CAPITAL): "balanceQuery",
        ("GET", routes.API_DEPOSITS): "depositQueryAll",
        ("GET", routes.API_DEPOSIT_ADDRESS): "depositAddressQuery",
        ("GET", routes.API_WITHDRAWALS): "withdrawalQueryAll",
        ("POST", routes.API_WITHDRAWALS): "withdraw",
        ("POST", routes.API_USER_2FA): "issueTwoFactorToken",
        ("GET", routes.API_ORDER): "orderQuery",
        ("POST", routes.API_ORDER): "orderExecute",
        ("DELETE", routes.API_ORDER): "orderCancel",
        ("GET", routes.API_ORDERS): "orderQueryAll",
        ("POST", routes.API_ORDERS): "orderExecute",
        ("DELETE", routes.API_ORDERS): "orderCancelAll",
        ("POST", routes.API_RFQ): "rfqSubmit",
        ("POST", routes.API_RFQ_QUOTE): "quoteSubmit",
        ("POST", routes.API_RFQ_ACCEPT): "quoteAccept",
        ("POST", routes.API_RFQ_CANCEL): "rfqCancel",
        ("POST", routes.API_RFQ_REFRESH): "rfqRefresh",
        ("GET", routes.API_FUTURES_POSITION): "positionQuery",
        ("GET", routes.API_BORROW_LEND_POSITIONS): "borrowLendPositionQuery",
        ("GET", routes.API_COLLATERAL): "collateralQuery",
        ("GET", routes.API_ACCOUNT): "accountQuery",
        ("PATCH", routes.API_ACCOUNT): "accountUpdate",
        ("GET", routes.API_ACCOUNT_MAX_BORROW): "maxBorrowQuantity",
        ("GET", routes.API_ACCOUNT_MAX_ORDER): "maxOrderQuantity",
        ("GET", routes.API_ACCOUNT_MAX_WITHDRAWAL): "maxWithdrawalQuantity",
        ("POST", routes.API_ACCOUNT_CONVERT_DUST): "convertDust",
        ("GET", routes.API_FILLS_HISTORY): "fillHistoryQueryAll",
        ("GET", routes.API_VAULT_PENDING_REDEEMS): "vaultPendingRedeemsQuery",
    }
)


def resolve_instruction(method: str, path: str) -> str | None:
    """
    Look up the instruction for a route.

    Args:
        method: HTTP method (any case).
        path: URL path; a query string, if present, is ignored.

    Returns:
        Instruction name, or None when the route is sent unsigned.
    """
    path = urlsplit(path).path or path
    return INSTRUCTIONS.get((method.upper(), path))
