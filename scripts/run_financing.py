"""
Run one financing pass against the configured database.

Usage:
    python scripts/run_financing.py [--batch-size 500] [--date 2024-05-01]
"""

import argparse
import sys
from datetime import date
from pathlib import Path

# Add parent directory to path so we can import the package without installing it
sys.path.insert(0, str(Path(__file__).parent.parent))

from invoice_financing.config import settings
from invoice_financing.infrastructure.database.session import SessionLocal, init_db
from invoice_financing.infrastructure.observability.logging import setup_logging
from invoice_financing.services.financing_service import run_financing


def main():
    parser = argparse.ArgumentParser(description="Finance all non-financed invoices")
    parser.add_argument("--batch-size", type=int, default=settings.invoice_batch_size)
    parser.add_argument("--date", type=date.fromisoformat, default=None, help="Financing date (YYYY-MM-DD)")
    args = parser.parse_args()

    setup_logging(settings.log_level)
    init_db()

    db = SessionLocal()
    try:
        summary = run_financing(db, batch_size=args.batch_size, financing_date=args.date)
    finally:
        db.close()

    print(f"Processed {summary.processed} invoices in {summary.pages} pages")
    for status, count in sorted(summary.outcomes.items(), key=lambda item: item[0].value):
        print(f"  {status.value}: {count}")


if __name__ == "__main__":
    main()
