#!/usr/bin/env python3
"""Print dashboard statistics and a report for one user's stored transactions."""

from __future__ import annotations

import argparse
import sys
from datetime import date
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from finance_tracker import store
from finance_tracker.aggregation import build_report, compute_stats
from finance_tracker.bucketing import TIMEFRAMES
from finance_tracker.errors import ValidationError
from finance_tracker.filtering import recent_transactions
from finance_tracker.formatting import format_currency, format_rate
from finance_tracker.frames import breakdown_to_frame, buckets_to_frame
from finance_tracker.logging_setup import configure_logging, get_logger
from finance_tracker.models import FilterCriteria

logger = get_logger("finance_tracker.scripts.show_summary")


def main(user: str, timeframe: str, start: str | None, end: str | None, db_path: str | None) -> int:
    store.init_db(db_path)
    everything = store.fetch_all(user, db_path=db_path)
    if not everything:
        print(f"No transactions stored for user {user!r}.")
        return 0

    stats = compute_stats(everything)
    print(f"Total balance:    {format_currency(stats.total_balance)}")
    print(f"Monthly income:   {format_currency(stats.monthly_income)}")
    print(f"Monthly expenses: {format_currency(stats.monthly_expenses)}")
    print(f"Savings rate:     {format_rate(stats.savings_rate)}")

    print("\nRecent transactions:")
    for txn in recent_transactions(everything):
        print(f"  {txn.date:%Y-%m-%d}  {txn.category:<16} {format_currency(txn.amount)}")

    default = FilterCriteria.current_month(date.today())
    try:
        criteria = FilterCriteria.from_mapping({
            'start_date': start or default.start_date.isoformat(),
            'end_date': end or default.end_date.isoformat(),
        })
    except ValidationError as exc:
        logger.error("Invalid date range: %s", exc)
        return 2

    granularity, count = TIMEFRAMES[timeframe]
    transactions = store.query_transactions(user, criteria, db_path=db_path)
    report = build_report(transactions, criteria, granularity, count, reference_date=criteria.end_date)

    print(f"\nWindow {criteria.start_date} to {criteria.end_date}: {len(report.transactions)} transactions")
    print(f"Income {format_currency(report.totals.income)}, "
          f"expenses {format_currency(report.totals.expenses)}, "
          f"net {format_currency(report.net_balance)}")
    print("\nTrend:")
    print(buckets_to_frame(report.series)[['Label', 'Income', 'Expenses']].to_string(index=False))
    if report.category_breakdown:
        print("\nBy category:")
        print(breakdown_to_frame(report.category_breakdown).to_string(index=False))
    return 0


if __name__ == '__main__':
    parser = argparse.ArgumentParser(description='Show transaction statistics for a user.')
    parser.add_argument('--user', required=True, help='User id whose transactions to summarize')
    parser.add_argument('--timeframe', choices=sorted(TIMEFRAMES), default='7days', help='Trend window preset')
    parser.add_argument('--start', help='Report window start (YYYY-MM-DD); defaults to month start')
    parser.add_argument('--end', help='Report window end (YYYY-MM-DD); defaults to today')
    parser.add_argument('--db', help='SQLite database path; defaults to FINANCE_TRACKER_DB_PATH')
    parser.add_argument('--log-level', default=None, help='Logging level (e.g. DEBUG)')
    args = parser.parse_args()
    configure_logging(args.log_level)
    raise SystemExit(main(args.user, args.timeframe, args.start, args.end, args.db))
