"""
test_export.py - Unit tests for export payloads (CSV rows, JSON text, filenames)
"""

import json
import pytest
from datetime import date, datetime
from decimal import Decimal

from treasury import (
    ReportConfig, TransferRequest, DateRange,
    REPORT_TYPE_SUMMARY, REPORT_TYPE_PERFORMANCE, REPORT_TYPE_TRANSACTIONS,
    REPORT_TYPE_RISK, REPORT_TYPE_DETAILED,
    build_report, get_date_range,
    to_serializable, flatten_for_csv, render_csv, render_json,
    export_filename, export_report,
)


@pytest.fixture
def report_for(ledger, now):
    ledger.execute(TransferRequest('3', '4', Decimal("100"), note="rent, January"))
    ledger.execute(TransferRequest('3', '1', Decimal("50")))

    def _build(report_type, **kwargs):
        config = ReportConfig(report_type, get_date_range(7, end=now), **kwargs)
        return build_report(config, ledger.get_accounts(), ledger.get_transactions(), now=now)

    return _build


class TestToSerializable:
    """Tests for to_serializable()."""

    def test_primitives(self):
        assert to_serializable(Decimal("1.5")) == 1.5
        assert to_serializable(datetime(2025, 1, 15, 12)) == "2025-01-15T12:00:00"
        assert to_serializable(date(2025, 1, 15)) == "2025-01-15"
        assert to_serializable("x") == "x"
        assert to_serializable(None) is None

    def test_containers_and_dataclasses(self):
        rng = DateRange(datetime(2025, 1, 1), datetime(2025, 1, 2))
        value = {'range': rng, 'amounts': (Decimal("1"), Decimal("2"))}
        assert to_serializable(value) == {
            'range': {'start': "2025-01-01T00:00:00", 'end': "2025-01-02T00:00:00"},
            'amounts': [1.0, 2.0],
        }


class TestRenderCsv:
    """Tests for render_csv()."""

    def test_empty(self):
        assert render_csv([]) == ""

    def test_header_from_first_row(self):
        rows = [{'a': 1, 'b': "x,y"}, {'a': 2}, {'a': 3, 'b': None}]
        assert render_csv(rows) == 'a,b\n1,"x,y"\n2,\n3,\n'


class TestFlattenForCsv:
    """Row shape per report type."""

    def test_summary_rows(self, report_for):
        rows = flatten_for_csv(report_for(REPORT_TYPE_SUMMARY))
        assert rows[0] == {'metric': 'TOTAL TRANSACTION VOLUME', 'value': 150.0}
        assert [r['metric'] for r in rows][-1] == 'PRIMARY CURRENCY'
        assert len(rows) == 7

    def test_performance_rows(self, report_for):
        rows = flatten_for_csv(report_for(REPORT_TYPE_PERFORMANCE))
        assert len(rows) == 10
        assert 'performance_ranking' in rows[0]

    def test_transaction_rows_are_flat(self, report_for):
        rows = flatten_for_csv(report_for(REPORT_TYPE_TRANSACTIONS))
        assert len(rows) == 2
        assert rows[0]['from_account_name'] == 'Bank_USD_1'
        assert rows[0]['to_account_id'] == '4'
        assert rows[1]['converted_amount'] == 6625.0

    def test_other_types_use_account_performance(self, report_for):
        rows = flatten_for_csv(report_for(REPORT_TYPE_RISK))
        assert len(rows) == 10
        assert set(rows[0]) >= {'account_id', 'net_flow', 'performance'}


class TestExportReport:
    """Tests for export_report() and export_filename()."""

    def test_json_export(self, report_for):
        text = export_report(report_for(REPORT_TYPE_DETAILED))
        payload = json.loads(text)
        assert payload['metadata']['record_count'] == 2
        assert payload['analytics']['summary']['total_transaction_volume'] == 150.0

    def test_json_keeps_non_ascii_symbols(self):
        assert render_json({'symbol': '₦'}) == '{\n  "symbol": "₦"\n}'

    def test_csv_export(self, report_for):
        text = export_report(report_for(REPORT_TYPE_TRANSACTIONS, format="csv"))
        lines = text.splitlines()
        assert lines[0].startswith("id,timestamp,from_account_id,from_account_name")
        assert len(lines) == 3
        assert '"rent, January"' in text

    def test_filename(self, now):
        assert export_filename(REPORT_TYPE_SUMMARY, now) == "summary_report_2025-01-15"
