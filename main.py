import argparse
import csv
import json
import logging
import os
import sys

# Ensure project root is on sys.path when run directly
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from database.db_manager import DatabaseManager
from database.ledger_store import LedgerStore

from services.transaction_service import TransactionService
from services.recurring_service import RecurringService
from services.report_service import ReportService
from services.data_service import DataService, default_export_filename
from services import chart_service

from utils.app_config import get_db_path
from utils.constants import (
    APP_NAME,
    BREAKDOWN_DISPLAY_LIMIT,
    CATEGORIES,
    DB_FILE,
    DEFAULT_PAYMENT,
    FREQUENCIES,
    INSIGHT_DISPLAY_LIMIT,
    TRANSACTION_TYPES,
)
from utils.currency import format_currency, format_percent, format_signed
from utils.date_helpers import current_month_str, friendly_month, parse_date, today_str
from utils.errors import FinanceError, ImportFormatError, ValidationError

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="finance-tracker", description=APP_NAME)
    parser.add_argument("--db", help="Path to the ledger database file.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging.")
    sub = parser.add_subparsers(dest="command", required=True)

    def tx_fields(p, required=True):
        p.add_argument("--date", default=None if not required else today_str())
        p.add_argument("--description", required=required)
        p.add_argument("--amount", required=required, help="Magnitude; sign follows --type.")
        p.add_argument("--type", choices=TRANSACTION_TYPES, default="expense" if required else None)
        p.add_argument("--category", default="")
        p.add_argument("--payment", default=DEFAULT_PAYMENT if required else None)

    tx_fields(sub.add_parser("add", help="Record a transaction."))

    p = sub.add_parser("edit", help="Edit a transaction.")
    p.add_argument("id", type=int)
    tx_fields(p, required=False)

    p = sub.add_parser("delete", help="Delete a transaction.")
    p.add_argument("id", type=int)

    for name in ("list", "summary", "insights"):
        p = sub.add_parser(name)
        p.add_argument("--month", default=None, help="YYYY-MM (default: this month)")

    sub.add_parser("months", help="List months with data, newest first.")

    p = sub.add_parser("categories", help="Show the suggested category names.")
    p.add_argument("--type", choices=TRANSACTION_TYPES, default=None)

    p = sub.add_parser("suggest", help="Autofill suggestions for a description.")
    p.add_argument("text")

    rec = sub.add_parser("recurring", help="Manage recurring transactions.")
    rec_sub = rec.add_subparsers(dest="recurring_command", required=True)
    p = rec_sub.add_parser("add")
    tx_fields(p)
    p.add_argument("--frequency", choices=FREQUENCIES, default="monthly")
    p.add_argument("--next-due", default=today_str())
    p = rec_sub.add_parser("edit")
    p.add_argument("id", type=int)
    p.add_argument("--description", default=None)
    p.add_argument("--amount", default=None, help="Magnitude; sign follows --type.")
    p.add_argument("--type", choices=TRANSACTION_TYPES, default=None)
    p.add_argument("--category", default=None)
    p.add_argument("--payment", default=None)
    p.add_argument("--frequency", choices=FREQUENCIES, default=None)
    p.add_argument("--next-due", default=None)
    rec_sub.add_parser("list")
    p = rec_sub.add_parser("delete")
    p.add_argument("id", type=int)

    p = sub.add_parser("apply-recurring", help="Materialize due recurring transactions.")
    p.add_argument("--today", default=None, help="YYYY-MM-DD (default: today)")

    p = sub.add_parser("export", help="Export the ledger.")
    p.add_argument("path", nargs="?", default=None)
    p.add_argument("--csv", action="store_true", help="CSV files in a ZIP archive.")
    p.add_argument("--month-csv", default=None, help="Export one month as a flat CSV.")

    p = sub.add_parser("import", help="Import a JSON export or CSV ZIP.")
    p.add_argument("path")
    p.add_argument("--mode", choices=["merge", "replace"], default="merge")

    p = sub.add_parser("chart", help="Render a PNG chart.")
    p.add_argument("path")
    p.add_argument("--month", default=None)
    p.add_argument("--kind", choices=["pie", "bars"], default="pie")

    sub.add_parser("clear", help="Delete all transactions and recurring transactions.")
    return parser


class App:
    def __init__(self, db: DatabaseManager):
        self.db = db
        self.store = LedgerStore(db)
        self.tx_svc = TransactionService(self.store)
        self.recurring_svc = RecurringService.from_settings(self.store)
        self.report_svc = ReportService(self.store)
        self.data_svc = DataService(self.store)
        self.symbol = db.get_setting("currency_symbol", "€")

    def money(self, amount: float) -> str:
        return format_currency(amount, self.symbol)

    def run(self, args) -> int:
        if args.command != "apply-recurring":
            new_transactions = self.recurring_svc.apply_due()
            if new_transactions:
                print(f"Added {len(new_transactions)} recurring transaction(s).")
        handler = getattr(self, "cmd_" + args.command.replace("-", "_"))
        return handler(args) or 0

    # ── Transactions ──────────────────────────────────────────────────────────

    def cmd_add(self, args):
        tx = self.tx_svc.create(
            args.date, args.description, args.amount, args.type, args.category, args.payment
        )
        print(f"Saved #{tx.id}: {tx.date} {tx.description} {format_signed(tx.amount, self.symbol)}")

    def cmd_edit(self, args):
        current = self.tx_svc.get_by_id(args.id)
        if current is None:
            raise ValidationError(f"Transaction {args.id} does not exist.")
        tx = self.tx_svc.update(
            args.id,
            args.date or current.date,
            args.description or current.description,
            args.amount if args.amount is not None else abs(current.amount),
            args.type or current.type,
            args.category or current.category,
            current.payment if args.payment is None else args.payment,
        )
        print(f"Updated #{tx.id}: {tx.date} {tx.description} {format_signed(tx.amount, self.symbol)}")

    def cmd_delete(self, args):
        self.tx_svc.delete(args.id)
        print(f"Deleted #{args.id}")

    def cmd_list(self, args):
        month = args.month or current_month_str()
        for tx in self.tx_svc.get_for_month(month):
            print(f"{tx.id:>5}  {tx.date}  {tx.description:<30} {tx.category:<24} "
                  f"{format_signed(tx.amount, self.symbol):>12}  {tx.payment}")

    def cmd_months(self, args):
        for month in self.tx_svc.available_months():
            print(f"{month}  {friendly_month(month)}")

    def cmd_categories(self, args):
        for type_ in [args.type] if args.type else TRANSACTION_TYPES:
            print(f"{type_.capitalize()}:")
            for name in CATEGORIES[type_]:
                print(f"  {name}")

    def cmd_summary(self, args):
        data = self.report_svc.monthly_data(args.month)
        print(friendly_month(data.month))
        print(f"  Income         {self.money(data.income):>14}")
        print(f"  Expenses       {self.money(data.expenses):>14}")
        print(f"  Balance        {format_signed(data.balance, self.symbol):>14}")
        print(f"  Carry forward  {format_signed(data.carry_forward, self.symbol):>14}")
        print(f"  Total balance  {format_signed(data.total_balance, self.symbol):>14}")
        breakdown = self.report_svc.category_breakdown(data.month, BREAKDOWN_DISPLAY_LIMIT)
        if breakdown:
            print("  Top categories:")
            for name, total in breakdown:
                print(f"    {name:<30} {self.money(total):>12}")

    def cmd_insights(self, args):
        insight = self.report_svc.insights(args.month)
        if insight is None:
            print("Not enough data: insights need an earlier month with transactions.")
            return
        print(f"{friendly_month(insight.month)} vs {friendly_month(insight.previous_month)}")
        print(f"  Expenses  {self.money(insight.current_total_expenses):>12} "
              f"({format_percent(insight.expense_percent_change)})")
        print(f"  Income    {self.money(insight.current_total_income):>12} "
              f"({format_percent(insight.income_percent_change)})")
        for c in insight.category_changes[:INSIGHT_DISPLAY_LIMIT]:
            print(f"    {c.category:<30} {format_signed(c.change, self.symbol):>12} "
                  f"({format_percent(c.percent_change)})")

    def cmd_suggest(self, args):
        for s in self.report_svc.suggest(args.text):
            print(f"{s.description:<30} {s.category:<24} "
                  f"{format_signed(s.amount, self.symbol):>12}  x{s.count}")

    # ── Recurring ─────────────────────────────────────────────────────────────

    def cmd_recurring(self, args):
        if args.recurring_command == "add":
            rule = self.recurring_svc.create(
                args.description, args.amount, args.type, args.frequency,
                args.next_due, args.category, args.payment,
            )
            print(f"Saved recurring #{rule.id}, next due {rule.next_due_date}")
        elif args.recurring_command == "edit":
            current = self.recurring_svc.get_by_id(args.id)
            if current is None:
                raise ValidationError(f"Recurring transaction {args.id} does not exist.")
            rule = self.recurring_svc.update(
                args.id,
                args.description or current.description,
                args.amount if args.amount is not None else abs(current.amount),
                args.type or current.type,
                args.frequency or current.frequency,
                args.next_due or current.next_due_date,
                current.category if args.category is None else args.category,
                current.payment if args.payment is None else args.payment,
            )
            print(f"Updated recurring #{rule.id}: {rule.description} "
                  f"{format_signed(rule.amount, self.symbol)}, next due {rule.next_due_date}")
        elif args.recurring_command == "list":
            for r in self.recurring_svc.get_all():
                print(f"{r.id:>5}  {r.frequency.upper():<8} {r.description:<30} "
                      f"{format_signed(r.amount, self.symbol):>12}  next {r.next_due_date}")
        else:
            self.recurring_svc.delete(args.id)
            print(f"Deleted recurring #{args.id}")

    def cmd_apply_recurring(self, args):
        ref = None
        if args.today:
            ref = parse_date(args.today)
            if ref is None:
                raise ValidationError("--today must use the YYYY-MM-DD format.")
        created = self.recurring_svc.apply_due(ref)
        print(f"Added {len(created)} recurring transaction(s).")

    # ── Import / export ───────────────────────────────────────────────────────

    def cmd_export(self, args):
        if args.month_csv:
            path = args.path or f"finance-tracker-{args.month_csv}.csv"
            with open(path, "w", newline="", encoding="utf-8") as f:
                csv.writer(f).writerows(self.report_svc.export_csv(args.month_csv))
        elif args.csv:
            path = args.path or default_export_filename().replace(".json", ".zip")
            self.data_svc.export_csv_zip(path)
        else:
            path = args.path or default_export_filename()
            with open(path, "w", encoding="utf-8") as f:
                json.dump(self.data_svc.export_json(), f, indent=2)
        print(f"Exported to {path}")

    def cmd_import(self, args):
        if args.path.lower().endswith(".zip"):
            stats = self.data_svc.import_csv_zip(args.path, args.mode)
        else:
            with open(args.path, "r", encoding="utf-8") as f:
                try:
                    data = json.load(f)
                except ValueError as exc:
                    raise ImportFormatError(f"{args.path} is not valid JSON: {exc}") from exc
            stats = self.data_svc.import_json(data, args.mode)
        print(f"Imported {stats['transactions']} transaction(s) and "
              f"{stats['recurring']} recurring transaction(s).")

    def cmd_chart(self, args):
        month = args.month or current_month_str()
        if args.kind == "pie":
            png = chart_service.render_category_pie(
                self.report_svc.category_breakdown(month), month
            )
        else:
            png = chart_service.render_monthly_bars(self.report_svc.monthly_history())
        with open(args.path, "wb") as f:
            f.write(png)
        print(f"Wrote {args.path}")

    def cmd_clear(self, args):
        self.store.clear_all()
        print("All data cleared.")


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    db = DatabaseManager.open(args.db or get_db_path() or DB_FILE)
    try:
        return App(db).run(args)
    except FinanceError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    except OSError as exc:
        logger.exception("File operation failed")
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())
