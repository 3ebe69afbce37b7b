"""Tabular report views over transactions, built with pandas for charting."""

from typing import Iterable

import pandas as pd

from budgettracker.aggregates import category_name
from budgettracker.domain import Category, Transaction, TransactionType

FRAME_COLUMNS = ["id", "date", "title", "category_id", "category", "type", "amount", "signed_amount", "notes"]


def transactions_frame(
    trans: Iterable[Transaction], cats: Iterable[Category] = ()
) -> pd.DataFrame:
    cats = tuple(cats)
    rows = [
        {
            "id": t.id,
            "date": t.date,
            "title": t.title,
            "category_id": t.category_id,
            "category": category_name(cats, t.category_id),
            "type": t.type.value,
            "amount": t.amount,
            "signed_amount": t.signed_amount,
            "notes": t.notes,
        }
        for t in trans
    ]
    df = pd.DataFrame(rows, columns=FRAME_COLUMNS)
    df["date"] = pd.to_datetime(df["date"])
    return df


def spending_trend(trans: Iterable[Transaction]) -> pd.Series:
    """Daily expense totals, indexed by day, only days with spending."""
    df = transactions_frame(trans)
    expenses = df[df["type"] == TransactionType.EXPENSE.value]
    if expenses.empty:
        return pd.Series(dtype=float, name="amount")
    return (
        expenses.assign(day=expenses["date"].dt.normalize())
        .groupby("day")["amount"]
        .sum()
        .sort_index()
    )


def monthly_totals(trans: Iterable[Transaction]) -> pd.DataFrame:
    """Income and expense per calendar month (index 'YYYY-MM')."""
    df = transactions_frame(trans)
    if df.empty:
        return pd.DataFrame(columns=[TransactionType.INCOME.value, TransactionType.EXPENSE.value])
    table = (
        df.assign(month=df["date"].dt.strftime("%Y-%m"))
        .pivot_table(index="month", columns="type", values="amount", aggfunc="sum", fill_value=0.0)
        .reindex(columns=[TransactionType.INCOME.value, TransactionType.EXPENSE.value], fill_value=0.0)
        .sort_index()
    )
    table.columns.name = None
    return table
