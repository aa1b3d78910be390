"""Payment gate: 402 challenge bodies and settlement transaction checks.

The gate runs before a report is built; it is never consulted by the
aggregation code itself.
"""
from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any

from .analysis.report_builder import format_timestamp
from .config import PaymentConfig
from .interfaces.chain import ChainClient

logger = logging.getLogger(__name__)

FULL_REPORT_RESOURCE = "/analyze/:address"
QUICK_SUMMARY_RESOURCE = "/quick/:address"
SETTLEMENT_FUNCTION = "transfer"


@dataclass(frozen=True)
class PaymentVerification:
    valid: bool
    error: str | None = None
    caller: str | None = None


def _contract_parts(contract_id: str) -> dict[str, str]:
    address, _, name = contract_id.partition(".")
    return {"address": address, "name": name}


def build_payment_challenge(
    config: PaymentConfig,
    resource: str,
    amount: int,
    now: datetime | None = None,
) -> dict[str, Any]:
    """Body of an HTTP 402 response asking for an sBTC payment."""
    now = now or datetime.now(timezone.utc)
    expires_at = now + timedelta(seconds=config.challenge_ttl_seconds)
    return {
        "error": "Payment Required",
        "code": "PAYMENT_REQUIRED",
        "resource": resource,
        "nonce": str(uuid.uuid4()),
        "expiresAt": format_timestamp(expires_at),
        "network": config.network,
        "maxAmountRequired": str(amount),
        "payTo": config.pay_to,
        "tokenType": "sBTC",
        "tokenContract": _contract_parts(config.settlement_contract),
        "instructions": [
            "1. Sign an sBTC transfer transaction",
            "2. Include the signed transaction hex in X-Payment header",
            "3. Transaction will be broadcast and verified",
        ],
    }


def build_discovery_document(config: PaymentConfig) -> dict[str, Any]:
    """Service-discovery document listing paid resources and their prices."""

    def _offer(resource: str, amount: int, description: str, fields: list[str]) -> dict[str, Any]:
        return {
            "scheme": "exact",
            "network": "stacks",
            "maxAmountRequired": str(amount),
            "resource": resource,
            "description": description,
            "mimeType": "application/json",
            "payTo": config.pay_to,
            "maxTimeoutSeconds": 300,
            "asset": "sBTC",
            "outputFields": fields,
        }

    return {
        "x402Version": 1,
        "name": "Wallet Intelligence",
        "description": (
            "Deep analysis of any Stacks wallet - holdings, DeFi positions, "
            "risk score, actionable insights"
        ),
        "accepts": [
            _offer(
                QUICK_SUMMARY_RESOURCE,
                config.quick_summary_price,
                "Quick wallet summary with total value, STX balance, and top holdings",
                ["address", "bnsName", "timestamp", "summary"],
            ),
            _offer(
                FULL_REPORT_RESOURCE,
                config.full_report_price,
                "Full wallet intelligence report with risk score, DeFi positions, NFTs, and insights",
                [
                    "address", "bnsName", "timestamp", "summary", "allocation",
                    "tokens", "nfts", "defi", "recentActivity", "insights",
                ],
            ),
        ],
    }


class PaymentVerifier:
    """Verify a settlement transaction against the indexer.

    Variants:
        ``sbtc``: a successful ``transfer`` call on the settlement contract.
        ``contract``: a successful call of the configured payment contract.
    """

    def __init__(self, chain: ChainClient, config: PaymentConfig) -> None:
        self._chain = chain
        self._config = config

    def _check_contract(self, tx: dict[str, Any]) -> str | None:
        """Return an error message, or ``None`` when the transaction qualifies."""
        contract_call = tx.get("contract_call")
        if not isinstance(contract_call, dict):
            contract_call = {}
        contract_id = contract_call.get("contract_id") or ""
        if tx.get("tx_type") != "contract_call" or not contract_id:
            return "Not a contract call"

        if self._config.variant == "contract":
            if contract_id != self._config.payment_contract:
                return f"Unexpected contract: {contract_id}"
            return None

        if (
            contract_id != self._config.settlement_contract
            or contract_call.get("function_name") != SETTLEMENT_FUNCTION
        ):
            return "Not an sBTC transfer"
        return None

    async def verify(self, tx_id: str) -> PaymentVerification:
        """Never raises; lookup failures produce an invalid verification."""
        try:
            tx = await self._chain.get_transaction(tx_id)
        except Exception as e:
            logger.error("Payment lookup for %s failed: %s", tx_id, e)
            return PaymentVerification(valid=False, error=f"Verification failed: {e}")

        if not tx:
            return PaymentVerification(valid=False, error="Transaction not found")

        status = tx.get("tx_status")
        if status != "success":
            return PaymentVerification(valid=False, error=f"Transaction status: {status}")

        error = self._check_contract(tx)
        if error:
            return PaymentVerification(valid=False, error=error)

        logger.info("Payment %s verified from %s", tx_id, tx.get("sender_address"))
        return PaymentVerification(valid=True, caller=tx.get("sender_address"))
