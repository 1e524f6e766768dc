"""
Seed demo master data and invoices for local runs and demos.

Creates (if missing):
- Issuers: Coffee Beans LLC (5 bps cap), Home Brew (3 bps), Beanstalk (2 bps)
- Obligors: Chocolate Factory, Sweets Inc, ChocoLoco
- Financiers: RichBank (10 day minimum), FatBank (12), MegaBank (8)
  with one annual rate per issuer

Invoices are always added, with maturities relative to today.

Usage:
    python scripts/seed_demo_data.py [--skip-invoices]
"""

import argparse
import sys
from datetime import date
from pathlib import Path
from typing import Dict, Optional

# Add parent directory to path so we can import the package without installing it
sys.path.insert(0, str(Path(__file__).parent.parent))

from sqlalchemy.orm import Session

from invoice_financing.infrastructure.database.repositories import (
    FinancierRepository,
    InvoiceRepository,
    IssuerRepository,
    ObligorRepository,
)
from invoice_financing.infrastructure.database.session import init_db, session_scope
from invoice_financing.utils.date_utils import days_from


ISSUERS = {
    "Coffee Beans LLC": 5,
    "Home Brew": 3,
    "Beanstalk": 2,
}

OBLIGORS = ["Chocolate Factory", "Sweets Inc", "ChocoLoco"]

# name -> (minimum term days, annual rate bps per issuer)
FINANCIERS = {
    "RichBank": (10, {"Coffee Beans LLC": 50, "Home Brew": 60, "Beanstalk": 30}),
    "FatBank": (12, {"Coffee Beans LLC": 40, "Home Brew": 80, "Beanstalk": 25}),
    "MegaBank": (8, {"Coffee Beans LLC": 30, "Home Brew": 50, "Beanstalk": 45}),
}

# (issuer, obligor, value cents, days to maturity)
INVOICES = [
    ("Coffee Beans LLC", "Chocolate Factory", 200_000, 52),
    ("Coffee Beans LLC", "Sweets Inc", 800_000, 33),
    ("Coffee Beans LLC", "ChocoLoco", 600_000, 43),
    ("Coffee Beans LLC", "Chocolate Factory", 500_000, 80),
    ("Coffee Beans LLC", "Sweets Inc", 6_000_000, 5),
    ("Home Brew", "ChocoLoco", 500_000, 10),
    ("Home Brew", "Chocolate Factory", 800_000, 15),
    ("Home Brew", "Sweets Inc", 9_000_000, 30),
    ("Home Brew", "ChocoLoco", 450_000, 32),
    ("Home Brew", "Chocolate Factory", 800_000, 11),
    ("Beanstalk", "Sweets Inc", 3_000_000, 10),
    ("Beanstalk", "ChocoLoco", 5_000_000, 14),
    ("Beanstalk", "Chocolate Factory", 9_000_000, 23),
    ("Beanstalk", "Sweets Inc", 800_000, 18),
    ("Beanstalk", "ChocoLoco", 9_000_000, 50),
]


def seed_master_data(db: Session) -> Dict[str, Dict[str, int]]:
    """
    Create issuers, obligors and financiers that do not exist yet.

    Names are unique, so a repeated run reuses the existing rows.

    Returns:
        Ids keyed by name: {"issuers": {...}, "obligors": {...}, "financiers": {...}}
    """
    issuer_repo = IssuerRepository(db)
    obligor_repo = ObligorRepository(db)
    financier_repo = FinancierRepository(db)

    issuers = {}
    for name, max_rate_bps in ISSUERS.items():
        issuer = issuer_repo.get_by_name(name) or issuer_repo.create_issuer(name, max_rate_bps)
        issuers[name] = issuer.id

    obligors = {}
    for name in OBLIGORS:
        obligor = obligor_repo.get_by_name(name) or obligor_repo.create_obligor(name)
        obligors[name] = obligor.id

    financiers = {}
    for name, (minimum_term_days, rates) in FINANCIERS.items():
        financier = financier_repo.get_by_name(name) or financier_repo.create_financier(
            name,
            minimum_term_days,
            {issuers[issuer_name]: rate for issuer_name, rate in rates.items()},
        )
        financiers[name] = financier.id

    return {"issuers": issuers, "obligors": obligors, "financiers": financiers}


def seed_invoices(db: Session, ids: Dict[str, Dict[str, int]], today: Optional[date] = None) -> int:
    """Add the demo invoices as NON_FINANCED; returns how many were added"""
    today = today or date.today()
    invoice_repo = InvoiceRepository(db)

    for issuer_name, obligor_name, value_cents, days in INVOICES:
        invoice_repo.create_invoice(
            issuer_id=ids["issuers"][issuer_name],
            obligor_id=ids["obligors"][obligor_name],
            value_cents=value_cents,
            maturity_date=days_from(today, days),
        )

    return len(INVOICES)


def main():
    parser = argparse.ArgumentParser(description="Seed demo financing data")
    parser.add_argument("--skip-invoices", action="store_true", help="Only create master data")
    args = parser.parse_args()

    init_db()
    with session_scope() as db:
        ids = seed_master_data(db)
        print(f"Master data ready: {len(ids['issuers'])} issuers, {len(ids['obligors'])} obligors, "
              f"{len(ids['financiers'])} financiers")

        if not args.skip_invoices:
            count = seed_invoices(db, ids)
            print(f"[SUCCESS] Added {count} non-financed invoices")


if __name__ == "__main__":
    main()
