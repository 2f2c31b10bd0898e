"""
Aggregations over recorded transactions.

Period overviews with change indicators, month-by-month cash-flow trends and
per-category breakdowns. Transactions are loaded into a pandas DataFrame and
grouped there; callers pass already-validated records.
"""

from datetime import date
from typing import Dict, List, Literal, Optional, Sequence, Tuple, get_args

import pandas as pd
from pydantic import BaseModel, ConfigDict, Field

from .formatting import percent_change, round_half_up
from .portfolio_insights import InvestmentProject

TransactionType = Literal["income", "expense", "investment"]
TRANSACTION_TYPES: tuple = get_args(TransactionType)

# Keys used for each transaction type in summaries.
_SUMMARY_KEYS = {"income": "income", "expense": "expenses", "investment": "investments"}


class TransactionRecord(BaseModel):
    """A single income, expense or investment transaction."""

    model_config = ConfigDict(frozen=True)

    id: Optional[int] = Field(default=None, description="Storage identifier")
    type: TransactionType = Field(..., description="Transaction type")
    amount: float = Field(..., ge=0, allow_inf_nan=False)
    description: str = Field(..., min_length=1)
    category: Optional[str] = Field(default=None)
    date: date


def _to_frame(transactions: Sequence[TransactionRecord]) -> pd.DataFrame:
    columns = ["type", "amount", "category", "date"]
    if not transactions:
        return pd.DataFrame(columns=columns)
    df = pd.DataFrame([t.model_dump(include=set(columns)) for t in transactions])
    df["date"] = pd.to_datetime(df["date"])
    df["amount"] = df["amount"].astype(float)
    return df


def period_bounds(months: int, today: date) -> Tuple[date, date]:
    """
    Start dates of the current and previous reporting windows.

    Returns:
        (previous_start, current_start); the previous window ends where the
        current one starts
    """
    anchor = pd.Timestamp(today)
    current_start = (anchor - pd.DateOffset(months=months)).date()
    previous_start = (anchor - pd.DateOffset(months=months * 2)).date()
    return previous_start, current_start


def summarize_period(
    transactions: Sequence[TransactionRecord], project_returns: float = 0.0
) -> Dict[str, float]:
    """
    Total each transaction type and derive the net cash flow.

    ``net`` is income minus expenses and investments plus any project returns
    realised in the same period.
    """
    summary = {key: 0.0 for key in _SUMMARY_KEYS.values()}
    df = _to_frame(transactions)
    if not df.empty:
        totals = df.groupby("type")["amount"].sum()
        for txn_type, total in totals.items():
            summary[_SUMMARY_KEYS[txn_type]] = float(total)

    summary["net"] = (
        summary["income"]
        - summary["expenses"]
        - summary["investments"]
        + project_returns
    )
    return summary


def project_returns_total(
    projects: Sequence[InvestmentProject],
    start: date,
    end: Optional[date] = None,
) -> float:
    """Sum of return events dated on or after ``start`` and before ``end``."""
    return float(
        sum(
            event.return_amount
            for project in projects
            for event in project.returns
            if event.return_date >= start and (end is None or event.return_date < end)
        )
    )


def summarize_projects(
    projects: Sequence[InvestmentProject], total_returns: float = 0.0
) -> Dict[str, float]:
    """Counts and totals over a user's projects."""
    if not projects:
        return {
            "total_projects": 0,
            "total_invested": 0.0,
            "avg_expected_return": 0.0,
            "active_projects": 0,
            "completed_projects": 0,
            "total_returns": total_returns,
        }

    return {
        "total_projects": len(projects),
        "total_invested": float(sum(p.initial_investment for p in projects)),
        "avg_expected_return": float(
            sum(p.expected_return_percent for p in projects) / len(projects)
        ),
        "active_projects": sum(1 for p in projects if p.status == "active"),
        "completed_projects": sum(1 for p in projects if p.status == "completed"),
        "total_returns": total_returns,
    }


def build_overview(
    transactions: Sequence[TransactionRecord],
    projects: Sequence[InvestmentProject],
    months: int,
    today: date,
) -> dict:
    """
    Financial overview of the last ``months`` months compared with the
    ``months`` before them.

    Args:
        transactions: Transactions covering at least both windows
        projects: The user's projects with their return events
        months: Window length in months
        today: Reference date closing the current window

    Returns:
        Dictionary with transaction and project summaries and percentage changes
    """
    previous_start, current_start = period_bounds(months, today)

    current = [t for t in transactions if t.date >= current_start]
    previous = [t for t in transactions if previous_start <= t.date < current_start]

    current_returns = project_returns_total(projects, current_start)
    previous_returns = project_returns_total(projects, previous_start, current_start)

    current_summary = summarize_period(current, current_returns)
    previous_summary = summarize_period(previous, previous_returns)

    changes = {
        key: round_half_up(percent_change(current_summary[key], previous_summary[key]))
        for key in ("income", "expenses", "investments", "net")
    }

    return {
        "period_months": months,
        "transaction_summary": current_summary,
        "project_summary": summarize_projects(projects, current_returns),
        "changes": changes,
    }


def monthly_trends(transactions: Sequence[TransactionRecord]) -> List[dict]:
    """
    Income, expenses, investments and net per calendar month, oldest first.

    Months without any transaction are omitted.
    """
    df = _to_frame(transactions)
    if df.empty:
        return []

    df["month"] = df["date"].dt.to_period("M")
    table = (
        df.pivot_table(
            index="month", columns="type", values="amount", aggfunc="sum", fill_value=0
        )
        .reindex(columns=list(TRANSACTION_TYPES), fill_value=0)
        .sort_index()
    )

    trends = []
    for month, row in table.iterrows():
        income = float(row["income"])
        expenses = float(row["expense"])
        investments = float(row["investment"])
        trends.append(
            {
                "month": month.strftime("%Y-%m"),
                "income": income,
                "expenses": expenses,
                "investments": investments,
                "net": income - expenses - investments,
            }
        )
    return trends


def category_breakdown(
    transactions: Sequence[TransactionRecord], transaction_type: str = "expense"
) -> List[dict]:
    """
    Totals per category for one transaction type, largest first.

    Uncategorised transactions are left out.
    """
    df = _to_frame(transactions)
    if df.empty:
        return []

    df = df[(df["type"] == transaction_type) & df["category"].notna()]
    if df.empty:
        return []

    grouped = (
        df.groupby("category")["amount"]
        .agg(total_amount="sum", count="count", avg_amount="mean")
        .sort_values("total_amount", ascending=False, kind="mergesort")
    )

    return [
        {
            "category": category,
            "total_amount": float(row["total_amount"]),
            "count": int(row["count"]),
            "avg_amount": round_half_up(float(row["avg_amount"])),
        }
        for category, row in grouped.iterrows()
    ]
