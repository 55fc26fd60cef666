"""CSV interchange: import a match log, export the debt report."""

import logging
from collections.abc import Sequence
from pathlib import Path
from typing import Union

import pandas as pd

from .debt import debt_totals
from .exceptions import MalformedMatchError
from .models import DebtSummary, MatchRecord
from .validation import validate_match

logger = logging.getLogger(__name__)

MATCH_LOG_COLUMNS = ["match_id", "played_at", "team_a", "team_b", "goals_a", "goals_b", "mvp_player"]
TEAM_SEPARATOR = ";"

DEBT_REPORT_COLUMNS = ["Participant", "Type", "Games", "Debt", "Credit", "Balance"]


def _team(cell) -> frozenset[str]:
    if pd.isna(cell):
        return frozenset()
    return frozenset(p.strip() for p in str(cell).split(TEAM_SEPARATOR) if p.strip())


def _goals(cell, match_id: str, column: str) -> int:
    try:
        value = float(cell)
    except (TypeError, ValueError):
        value = None
    if value is None or not value.is_integer():
        raise MalformedMatchError(match_id, f"{column} is not a whole number: {cell!r}")
    return int(value)


def read_match_log(path: Union[str, Path]) -> list[MatchRecord]:
    """Read and validate a match log exported as CSV.

    Team columns hold player ids separated by ';'. The whole file is rejected
    on the first malformed row.
    """
    df = pd.read_csv(path, dtype={"match_id": str, "team_a": str, "team_b": str, "mvp_player": str})

    missing = [c for c in MATCH_LOG_COLUMNS if c not in df.columns]
    if missing:
        raise ValueError(f"{path} is missing columns: {', '.join(missing)}")

    matches = []
    for row_number, row in enumerate(df.itertuples(index=False), start=2):
        match_id = str(row.match_id) if pd.notna(row.match_id) else f"row {row_number}"
        match = MatchRecord(
            match_id=match_id,
            team_a=_team(row.team_a),
            team_b=_team(row.team_b),
            goals_a=_goals(row.goals_a, match_id, "goals_a"),
            goals_b=_goals(row.goals_b, match_id, "goals_b"),
            mvp_player=str(row.mvp_player).strip() if pd.notna(row.mvp_player) else None,
            played_at=pd.to_datetime(row.played_at).to_pydatetime() if pd.notna(row.played_at) else None,
        )
        validate_match(match)
        matches.append(match)

    logger.info("Read %d matches from %s", len(matches), path)
    return matches


def _participant_type(summary: DebtSummary) -> str:
    if summary.is_guest:
        return "Guest"
    return "Verified" if summary.is_verified else "Unverified"


def debt_report_frame(summaries: Sequence[DebtSummary]) -> pd.DataFrame:
    """The debt report as a table with a trailing TOTAL row, amounts to 2 d.p."""
    rows = [
        {
            "Participant": s.name,
            "Type": _participant_type(s),
            "Games": len(s.lines),
            "Debt": round(s.total_debt, 2),
            "Credit": round(s.credit, 2),
            "Balance": round(s.net_balance, 2),
        }
        for s in summaries
    ]
    totals = debt_totals(summaries)
    rows.append(
        {
            "Participant": "TOTAL",
            "Type": "",
            "Games": sum(len(s.lines) for s in summaries),
            "Debt": round(totals["debt"], 2),
            "Credit": round(totals["credit"], 2),
            "Balance": round(totals["net_balance"], 2),
        }
    )
    return pd.DataFrame(rows, columns=DEBT_REPORT_COLUMNS)


def export_debt_report(summaries: Sequence[DebtSummary], path: Union[str, Path]) -> Path:
    path = Path(path)
    debt_report_frame(summaries).to_csv(path, index=False, float_format="%.2f")
    logger.info("Wrote debt report for %d participants to %s", len(summaries), path)
    return path
