"""
Stock Ledger Verification Script
Checks that every product's stock equals the sum of its movements
"""
import sys
import os
from datetime import datetime
sys.path.append(os.getcwd())

from erp.core import SessionLocal
from erp.services import InventoryService


def main() -> int:
    db = SessionLocal()
    try:
        print('=' * 70)
        print('STOCK LEDGER VERIFICATION REPORT')
        print(f'Generated: {datetime.now().strftime("%Y-%m-%d %H:%M:%S")}')
        print('=' * 70)

        summary = InventoryService.get_summary(db)
        print('\n[1] LEDGER TOTALS')
        print('-' * 50)
        for key, value in summary.items():
            print(f'  {key:<18} {value:>10}')

        print('\n[2] PRODUCT CONSISTENCY')
        print('-' * 50)
        mismatches = InventoryService.verify_ledger(db)
        if not mismatches:
            print('  All products match their ledger.')
            return 0

        print(f'  {"SKU":<20} {"Stock":>10} {"Ledger":>10}')
        print(f'  {"-"*20} {"-"*10} {"-"*10}')
        for m in mismatches:
            print(f'  {m["sku"]:<20} {m["stock_quantity"]:>10} {m["ledger_quantity"]:>10}')
        print(f'\n  {len(mismatches)} product(s) out of balance')
        return 1
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())
