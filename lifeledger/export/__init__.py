"""Ledger export and import."""

from lifeledger.export.exporter import (
    CSV_COLUMNS,
    ImportFormatError,
    LedgerSnapshot,
    export_ledger_json,
    export_transactions_csv,
    import_ledger_json,
    import_transactions_csv,
)

__all__ = [
    "CSV_COLUMNS",
    "ImportFormatError",
    "LedgerSnapshot",
    "export_ledger_json",
    "export_transactions_csv",
    "import_ledger_json",
    "import_transactions_csv",
]
