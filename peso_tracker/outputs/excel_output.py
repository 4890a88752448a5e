# peso_tracker/outputs/excel_output.py

"""Excel output module backed by XlsxWriter.

Writes one worksheet with the itemized rows of a period and a ``Summary``
worksheet that totals each kind of row by category, followed by the net
balance (income minus expense).
"""

from __future__ import annotations

import os
import xlsxwriter

from peso_tracker.core.models import RecordKind
from peso_tracker.outputs.base import BaseOutput
from peso_tracker.reports import category_breakdown, totals_by_kind
from peso_tracker.utils import sort_transactions


class ExcelOutput(BaseOutput):
    """Generate a local Excel workbook for a month of transactions."""

    SUMMARY = "Summary"
    HEADERS = ["date", "kind", "type", "name", "category", "amount"]

    def __init__(self, config: dict):
        self.config = config
        self.output_dir = config.get("output_dir", "data")
        os.makedirs(self.output_dir, exist_ok=True)

    def append(self, transactions, month=None):
        if not transactions:
            print("No transactions to write.")
            return None

        label = month or "Transactions"
        out_path = os.path.join(self.output_dir, f"Transactions{month or ''}.xlsx")

        workbook = xlsxwriter.Workbook(out_path)
        amount_fmt = workbook.add_format({"num_format": self._amount_format()})

        ws = workbook.add_worksheet(label)
        ws.freeze_panes(1, 0)
        ws.write_row(0, 0, self.HEADERS)
        rows = sort_transactions(transactions)
        for idx, tx in enumerate(rows, start=1):
            ws.write_row(idx, 0, [
                tx.date.isoformat(),
                tx.kind.value,
                tx.occurrence_type.value if tx.occurrence_type else "",
                tx.name,
                tx.category,
            ])
            ws.write_number(idx, 5, float(tx.amount), amount_fmt)
        ws.set_column(5, 5, None, amount_fmt)
        ws.add_table(0, 0, len(rows), 5, {
            "columns": [{"header": h} for h in self.HEADERS]
        })

        summary_ws = workbook.add_worksheet(self.SUMMARY)
        summary_ws.freeze_panes(1, 0)
        summary_ws.set_column(2, 2, None, amount_fmt)
        summary_ws.write_row(0, 0, ["kind", "category", "total"])
        row_idx = 1
        for table in self._build_summary_table(rows):
            summary_ws.write(row_idx, 0, table[0])
            summary_ws.write(row_idx, 1, table[1])
            summary_ws.write_number(row_idx, 2, table[2], amount_fmt)
            row_idx += 1

        workbook.close()
        print(f"Written Excel workbook {out_path}")
        return out_path

    def _amount_format(self):
        symbol = str(self.config.get("currency_symbol", "$")).replace('"', "")
        return f'"{symbol}"#,##0.00'

    def _build_summary_table(self, transactions):
        table = []
        for kind in RecordKind:
            for category, total in category_breakdown(transactions, kind):
                table.append([kind.value, category, total])
        totals = totals_by_kind(transactions)
        table.append([
            "net",
            "",
            totals[RecordKind.INCOME.value] - totals[RecordKind.EXPENSE.value],
        ])
        return table
