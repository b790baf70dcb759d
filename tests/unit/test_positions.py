from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal

import pytest

from transfer_agent.services.positions import (
    CreditDebit,
    classify_transaction,
    compute_balances,
    current_balance,
    holdings_ownership,
    issuer_ownership,
    ownership_percentage,
    statement_holdings,
)


@dataclass
class Row:
    transaction_type: str | None
    share_quantity: object
    shareholder_id: str | None = "holder-1"
    cusip: str | None = "CUSIP0001"
    transaction_date: date | None = None
    restriction_id: str | None = None


@pytest.mark.parametrize("transaction_type", ["DWAC Withdrawal", "Transfer Debit"])
def test_debit_types(transaction_type: str) -> None:
    assert classify_transaction(transaction_type) is CreditDebit.DEBIT


@pytest.mark.parametrize(
    "transaction_type",
    ["IPO", "DWAC Deposit", "Transfer Credit", "dwac withdrawal", "Partial Withdrawal", "", None],
)
def test_everything_else_is_credit(transaction_type: str | None) -> None:
    assert classify_transaction(transaction_type) is CreditDebit.CREDIT


def test_ipo_then_withdrawal_leaves_700() -> None:
    rows = [Row("IPO", 1000), Row("DWAC Withdrawal", 300)]
    assert current_balance(rows) == Decimal("700")


def test_balance_is_order_independent() -> None:
    rows = [Row("DWAC Withdrawal", 300), Row("IPO", 1000), Row("Transfer Debit", 50)]
    assert current_balance(rows) == current_balance(list(reversed(rows))) == Decimal("650")


def test_negative_balances_clamp_to_zero_for_display() -> None:
    rows = [Row("IPO", 100), Row("Transfer Debit", 250)]

    assert compute_balances(rows) == {"holder-1": Decimal("-150")}
    assert current_balance(rows) == Decimal("0")


def test_missing_quantity_counts_as_zero() -> None:
    assert current_balance([Row("IPO", None), Row("IPO", "12.5")]) == Decimal("12.5")


def test_ownership_percentage_rounds_to_cents() -> None:
    assert ownership_percentage(Decimal("1"), Decimal("3")) == Decimal("33.33")
    assert ownership_percentage(Decimal("2"), Decimal("3")) == Decimal("66.67")


@pytest.mark.parametrize("denominator", [0, -10, None])
def test_ownership_percentage_without_positive_denominator(denominator: object) -> None:
    assert ownership_percentage(Decimal("50"), denominator) == Decimal("0.00")


def test_issuer_ownership_uses_sum_of_clamped_balances() -> None:
    rows = [
        Row("IPO", 750, shareholder_id="a"),
        Row("IPO", 250, shareholder_id="b"),
        Row("IPO", 10, shareholder_id="c"),
        Row("Transfer Debit", 40, shareholder_id="c"),
    ]

    result = issuer_ownership(["a", "b", "c", "d"], rows)

    assert result["a"].current_shares == Decimal("750")
    assert result["a"].calculated_ownership_percentage == Decimal("75.00")
    assert result["b"].calculated_ownership_percentage == Decimal("25.00")
    assert result["c"].current_shares == Decimal("0")
    assert result["d"].calculated_ownership_percentage == Decimal("0.00")
    total = sum(item.calculated_ownership_percentage for item in result.values())
    assert Decimal("0") <= total <= Decimal("100")


def test_holdings_ownership_against_authorized_shares() -> None:
    positions = [
        {"id": "p1", "shares_owned": Decimal("2500"), "security_id": "s1"},
        {"id": "p2", "shares_owned": Decimal("10"), "security_id": "missing"},
    ]
    securities = {"s1": {"id": "s1", "total_authorized_shares": Decimal("10000")}}

    enriched = holdings_ownership(positions, securities)

    assert enriched[0]["ownership_percentage"] == Decimal("25.00")
    assert enriched[0]["security"]["id"] == "s1"
    assert enriched[1]["security"] is None
    assert enriched[1]["ownership_percentage"] == Decimal("0.00")


def test_statement_holdings_running_totals_per_cusip() -> None:
    rows = [
        Row("Transfer Debit", 200, transaction_date=date(2025, 3, 1)),
        Row("IPO", 1000, transaction_date=date(2025, 1, 15), restriction_id="tmpl-1"),
        Row("IPO", 50, cusip="CUSIP0002", transaction_date=date(2025, 2, 1)),
        Row("DWAC Withdrawal", 50, cusip="CUSIP0002", transaction_date=date(2025, 2, 2)),
        Row("IPO", 5, transaction_date=date(2025, 6, 1)),
    ]

    holdings = statement_holdings(rows, as_of=date(2025, 3, 31))

    assert [holding.cusip for holding in holdings] == ["CUSIP0001"]
    holding = holdings[0]
    assert holding.shares == Decimal("800")
    assert holding.restriction_ids == ["tmpl-1"]
    assert [line.running_total for line in holding.transactions] == [Decimal("1000"), Decimal("800")]
    assert holding.transactions[1].shares == Decimal("-200")
