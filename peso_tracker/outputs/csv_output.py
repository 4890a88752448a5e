# peso_tracker/outputs/csv_output.py

import os
import csv
from decimal import Decimal
from peso_tracker.outputs.base import BaseOutput
from peso_tracker.utils import sort_transactions


class CSVOutput(BaseOutput):
    """
    Writes expanded transaction rows to Transactions<YYYY-MM>.csv (or
    Transactions.csv when no month label is given), sorted by date
    (oldest to latest).
    """
    HEADERS = ['date', 'kind', 'type', 'name', 'category', 'amount']

    def __init__(self, config):
        self.config      = config
        self.output_dir  = config.get('output_dir', 'data')
        os.makedirs(self.output_dir, exist_ok=True)

    def append(self, transactions, month=None):
        if not transactions:
            print("No transactions to write.")
            return None

        filename = f"Transactions{month}.csv" if month else "Transactions.csv"
        out_path = os.path.join(self.output_dir, filename)

        with open(out_path, 'w', newline='', encoding='utf-8') as f:
            writer = csv.writer(f)
            writer.writerow(self.HEADERS)
            for tx in sort_transactions(transactions):
                writer.writerow([
                    tx.date.isoformat(),
                    tx.kind.value,
                    tx.occurrence_type.value if tx.occurrence_type else '',
                    str(tx.name).strip(),
                    tx.category,
                    f"{Decimal(str(tx.amount)):.2f}",
                ])

        print(f"Written {len(transactions)} transactions to {out_path}")
        return out_path
