from database.ledger_store import LedgerStore
from models.summary import MonthlyAggregate, MonthlyInsight, Suggestion
from services import aggregation
from services.insights import compute_insights
from services.suggestions import suggest as rank_suggestions
from utils.constants import SUGGESTION_LIMIT
from utils.date_helpers import current_month_str


class ReportService:
    """Runs the read-only engines against a fresh snapshot of the ledger."""

    def __init__(self, store: LedgerStore):
        self._store = store

    def _transactions(self):
        return self._store.load_snapshot().transactions

    def monthly_data(self, month: str | None = None) -> MonthlyAggregate:
        m = month or current_month_str()
        return aggregation.compute_monthly_data(self._transactions(), m)

    def category_breakdown(
        self, month: str | None = None, limit: int | None = None
    ) -> list[tuple[str, float]]:
        """Return [(category, total), ...] for the pie chart, largest first."""
        m = month or current_month_str()
        in_month = aggregation.filter_month(self._transactions(), m)
        breakdown = aggregation.category_breakdown(in_month)
        return breakdown[:limit] if limit else breakdown

    def insights(self, month: str | None = None) -> MonthlyInsight | None:
        m = month or current_month_str()
        return compute_insights(self._transactions(), m)

    def suggest(self, partial: str) -> list[Suggestion]:
        raw = self._store.db.get_setting("suggestion_limit", str(SUGGESTION_LIMIT))
        try:
            limit = int(raw)
        except ValueError:
            limit = SUGGESTION_LIMIT
        return rank_suggestions(self._transactions(), partial, limit=limit)

    def monthly_history(self) -> list[dict]:
        """Return list of {month, income, expense, net} for bar chart."""
        return aggregation.monthly_history(self._transactions())

    def export_csv(self, month: str | None = None) -> list[list[str]]:
        """Return rows suitable for CSV export."""
        m = month or current_month_str()
        transactions = sorted(
            self._store.list_transactions_for_month(m), key=lambda t: (t.date, t.id)
        )
        header = ["Date", "Type", "Category", "Description", "Amount", "Payment"]
        rows = [header]
        for tx in transactions:
            rows.append([
                tx.date,
                tx.type,
                tx.category,
                tx.description,
                f"{tx.amount:.2f}",
                tx.payment,
            ])
        return rows
