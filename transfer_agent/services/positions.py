"""Share position derivation: credit/debit classification, balances and ownership.

Every balance shown by the service is derived here from the transfer ledger.
A transfer whose type is a debit subtracts its quantity, any other type adds
it. Balances are summed in any order and clamped at zero for display.
"""
from __future__ import annotations

import enum
from collections import defaultdict
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Protocol

DEBIT_TRANSACTION_TYPES: frozenset[str] = frozenset({"DWAC Withdrawal", "Transfer Debit"})

_ZERO = Decimal("0")
_HUNDRED = Decimal("100")
_CENT = Decimal("0.01")


class CreditDebit(str, enum.Enum):
    CREDIT = "Credit"
    DEBIT = "Debit"


class TransferLike(Protocol):
    shareholder_id: str | None
    transaction_type: str | None
    share_quantity: Any


def classify_transaction(transaction_type: str | None) -> CreditDebit:
    """Return whether a transaction type adds to or removes from a position."""

    if transaction_type in DEBIT_TRANSACTION_TYPES:
        return CreditDebit.DEBIT
    return CreditDebit.CREDIT


def _to_decimal(value: Any) -> Decimal:
    if value is None:
        return _ZERO
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def signed_quantity(transfer: TransferLike) -> Decimal:
    quantity = _to_decimal(transfer.share_quantity)
    if classify_transaction(transfer.transaction_type) is CreditDebit.DEBIT:
        return -quantity
    return quantity


def clamp(balance: Decimal) -> Decimal:
    return balance if balance > _ZERO else _ZERO


def compute_balances(transfers: Iterable[TransferLike]) -> dict[str | None, Decimal]:
    """Sum signed quantities per shareholder. Results are not clamped."""

    balances: dict[str | None, Decimal] = defaultdict(lambda: _ZERO)
    for transfer in transfers:
        balances[transfer.shareholder_id] += signed_quantity(transfer)
    return dict(balances)


def current_balance(transfers: Iterable[TransferLike]) -> Decimal:
    """Clamped balance of a single holder's transfers."""

    total = sum((signed_quantity(transfer) for transfer in transfers), _ZERO)
    return clamp(total)


def ownership_percentage(balance: Decimal, denominator: Any) -> Decimal:
    """Percentage of ``denominator`` held, rounded to two decimals."""

    total = _to_decimal(denominator)
    if total <= _ZERO:
        return _ZERO.quantize(_CENT)
    share = clamp(_to_decimal(balance)) / total * _HUNDRED
    return share.quantize(_CENT, rounding=ROUND_HALF_UP)


@dataclass(slots=True, frozen=True)
class HolderOwnership:
    shareholder_id: str
    current_shares: Decimal
    calculated_ownership_percentage: Decimal


def issuer_ownership(
    shareholder_ids: Sequence[str], transfers: Iterable[TransferLike]
) -> dict[str, HolderOwnership]:
    """Ownership of each holder against the sum of all clamped issuer balances."""

    balances = compute_balances(transfers)
    outstanding = sum((clamp(value) for value in balances.values()), _ZERO)
    result: dict[str, HolderOwnership] = {}
    for shareholder_id in shareholder_ids:
        held = clamp(balances.get(shareholder_id, _ZERO))
        result[shareholder_id] = HolderOwnership(
            shareholder_id=shareholder_id,
            current_shares=held,
            calculated_ownership_percentage=ownership_percentage(held, outstanding),
        )
    return result


class DatedTransferLike(TransferLike, Protocol):
    cusip: str | None
    transaction_date: date | None
    restriction_id: str | None


@dataclass(slots=True)
class LedgerLine:
    date: date | None
    type: str | None
    shares: Decimal
    running_total: Decimal


@dataclass(slots=True)
class StatementHolding:
    cusip: str
    shares: Decimal = _ZERO
    restriction_ids: list[str] = field(default_factory=list)
    transactions: list[LedgerLine] = field(default_factory=list)


def statement_holdings(
    transfers: Iterable[DatedTransferLike], *, as_of: date | None = None
) -> list[StatementHolding]:
    """Per-CUSIP running totals for a holder's statement.

    Transfers dated after ``as_of`` are ignored. Undated transfers sort first.
    Only CUSIPs with a positive closing balance are returned.
    """

    eligible = [
        transfer
        for transfer in transfers
        if as_of is None or transfer.transaction_date is None or transfer.transaction_date <= as_of
    ]
    eligible.sort(key=lambda transfer: transfer.transaction_date or date.min)

    holdings: dict[str, StatementHolding] = {}
    for transfer in eligible:
        cusip = transfer.cusip or ""
        holding = holdings.setdefault(cusip, StatementHolding(cusip=cusip))
        change = signed_quantity(transfer)
        holding.shares += change
        holding.transactions.append(
            LedgerLine(
                date=transfer.transaction_date,
                type=transfer.transaction_type,
                shares=change,
                running_total=holding.shares,
            )
        )
        if transfer.restriction_id and transfer.restriction_id not in holding.restriction_ids:
            holding.restriction_ids.append(transfer.restriction_id)

    return [holding for holding in holdings.values() if holding.shares > _ZERO]


def holdings_ownership(
    positions: Iterable[Mapping[str, Any]], securities: Mapping[str, Mapping[str, Any]]
) -> list[dict[str, Any]]:
    """Attach each position's security and ownership against authorized shares."""

    enriched: list[dict[str, Any]] = []
    for position in positions:
        security = securities.get(position.get("security_id") or "")
        authorized = security.get("total_authorized_shares") if security else None
        enriched.append(
            {
                **position,
                "security": security,
                "ownership_percentage": ownership_percentage(
                    _to_decimal(position.get("shares_owned")), authorized
                ),
            }
        )
    return enriched


__all__ = [
    "DEBIT_TRANSACTION_TYPES",
    "CreditDebit",
    "HolderOwnership",
    "LedgerLine",
    "StatementHolding",
    "classify_transaction",
    "clamp",
    "compute_balances",
    "current_balance",
    "holdings_ownership",
    "issuer_ownership",
    "ownership_percentage",
    "signed_quantity",
    "statement_holdings",
]
