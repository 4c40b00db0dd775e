"""Top‑level package for the Finance Tracker reporting engine.

The primary modules are:

* ``filtering`` – criteria filter, text search and ordering of transactions
* ``bucketing`` – day/month time series for the trend charts
* ``categories`` – per-category totals
* ``aggregation`` – dashboard statistics and the end-to-end report
* ``notifications`` – readable messages from database change events
* ``store`` – SQLite transaction store
* ``visualization`` – Plotly figures for the series and breakdowns

A quick summary of the stored transactions can be printed with:

```bash
python scripts/show_summary.py --user demo
```
"""

from .aggregation import build_report, compute_stats, compute_totals, savings_rate
from .bucketing import bucketize, bucketize_timeframe
from .categories import breakdown_by_category, top_categories
from .errors import DivisionUndefined, FinanceTrackerError, ValidationError
from .filtering import filter_transactions, recent_transactions, search_transactions, sort_transactions
from .models import Bucket, CategoryTotal, FilterCriteria, Report, Stats, Totals, Transaction

__all__ = [
    "Bucket",
    "CategoryTotal",
    "DivisionUndefined",
    "FilterCriteria",
    "FinanceTrackerError",
    "Report",
    "Stats",
    "Totals",
    "Transaction",
    "ValidationError",
    "breakdown_by_category",
    "bucketize",
    "bucketize_timeframe",
    "build_report",
    "compute_stats",
    "compute_totals",
    "filter_transactions",
    "recent_transactions",
    "savings_rate",
    "search_transactions",
    "sort_transactions",
    "top_categories",
]
