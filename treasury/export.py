"""
export.py - Serializable export payloads

Shapes report output for CSV or JSON export. Writing the bytes somewhere
(a download, a file) is the host's job; this module stops at strings and
plain Python structures.
"""

from __future__ import annotations
from dataclasses import asdict, is_dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional
import csv
import io
import json

from .reports import (
    ReportData,
    REPORT_TYPE_SUMMARY, REPORT_TYPE_PERFORMANCE, REPORT_TYPE_TRANSACTIONS,
)


def to_serializable(value: Any) -> Any:
    """
    Recursively convert a value into JSON-ready primitives.

    Decimal becomes float, datetime/date become ISO strings, dataclasses
    become dicts, tuples and sets become lists.
    """
    if is_dataclass(value) and not isinstance(value, type):
        return to_serializable(asdict(value))
    if isinstance(value, Decimal):
        return float(value)
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, dict):
        return {str(k): to_serializable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple, set, frozenset)):
        return [to_serializable(item) for item in value]
    return value


def _flatten(row: Dict[str, Any], prefix: str = "") -> Dict[str, Any]:
    """Flatten nested dicts into prefix_key columns."""
    flat: Dict[str, Any] = {}
    for key, value in row.items():
        name = f"{prefix}{key}"
        if isinstance(value, dict):
            flat.update(_flatten(value, prefix=f"{name}_"))
        else:
            flat[name] = value
    return flat


def flatten_for_csv(report: ReportData) -> List[Dict[str, Any]]:
    """
    Row-oriented view of a report for CSV export.

    summary       one METRIC/value row per summary metric
    performance   one row per account (with ranking)
    transactions  one row per transaction, party objects flattened
    other types   analytics account-performance rows
    """
    report_type = report.config.type
    content = report.to_dict()

    if report_type == REPORT_TYPE_SUMMARY:
        rows = [
            {'metric': key.replace('_', ' ').upper(), 'value': value}
            for key, value in content['summary_metrics'].items()
        ]
    elif report_type == REPORT_TYPE_PERFORMANCE:
        rows = list(content['account_performance'])
    elif report_type == REPORT_TYPE_TRANSACTIONS:
        rows = [_flatten(tx) for tx in content['transactions']]
    else:
        rows = [asdict(p) for p in report.analytics.account_performance]
    return [to_serializable(row) for row in rows]


def render_csv(rows: List[Dict[str, Any]]) -> str:
    """
    Render rows as CSV text; the header comes from the first row's keys.

    Values containing a comma are quoted, None renders empty, keys missing
    from later rows render empty. No rows gives "".
    """
    if not rows:
        return ""
    buffer = io.StringIO()
    writer = csv.DictWriter(
        buffer, fieldnames=list(rows[0].keys()), lineterminator="\n", extrasaction="ignore"
    )
    writer.writeheader()
    writer.writerows(rows)
    return buffer.getvalue()


def render_json(value: Any) -> str:
    return json.dumps(to_serializable(value), indent=2, ensure_ascii=False)


def export_filename(report_type: str, now: Optional[datetime] = None) -> str:
    """Base filename without extension, e.g. 'summary_report_2025-01-31'."""
    now = now or datetime.now()
    return f"{report_type}_report_{now.date().isoformat()}"


def export_report(report: ReportData) -> str:
    """Render a report in its configured format (csv, otherwise json)."""
    if report.config.format == "csv":
        return render_csv(flatten_for_csv(report))
    return render_json(report.to_dict())
