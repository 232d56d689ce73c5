"""PNG charts for the report screens, drawn with matplotlib's Agg backend."""
import io

from matplotlib.backends.backend_agg import FigureCanvasAgg
from matplotlib.figure import Figure

from utils.constants import CHART_COLORS, EXPENSE_COLOR, INCOME_COLOR
from utils.date_helpers import friendly_month

BG = "#e4e4e4"
FG = "#444444"


def _new_figure(figsize) -> tuple[Figure, object]:
    fig = Figure(figsize=figsize, dpi=80, tight_layout=True)
    FigureCanvasAgg(fig)
    ax = fig.add_subplot(111)
    fig.patch.set_facecolor(BG)
    ax.set_facecolor(BG)
    ax.tick_params(colors=FG, labelsize=8)
    for spine in ax.spines.values():
        spine.set_edgecolor(FG)
    return fig, ax


def _no_data(ax, text: str):
    ax.text(0.5, 0.5, text, ha="center", va="center",
            transform=ax.transAxes, color="gray")


def _to_png(fig: Figure) -> bytes:
    buf = io.BytesIO()
    fig.savefig(buf, format="png", facecolor=fig.get_facecolor())
    return buf.getvalue()


def render_category_pie(breakdown: list[tuple[str, float]], month: str | None = None) -> bytes:
    """Pie chart of expense totals per category."""
    fig, ax = _new_figure((4, 4))
    total = sum(value for _, value in breakdown)
    if not breakdown or total == 0:
        _no_data(ax, "No expense data")
        return _to_png(fig)

    colors = [CHART_COLORS[i % len(CHART_COLORS)] for i in range(len(breakdown))]
    ax.pie(
        [value for _, value in breakdown],
        labels=[name for name, _ in breakdown],
        colors=colors,
        startangle=90,
        textprops={"fontsize": 8, "color": FG},
    )
    ax.set_aspect("equal")
    if month:
        ax.set_title(friendly_month(month), color=FG, fontsize=10)
    return _to_png(fig)


def render_monthly_bars(history: list[dict]) -> bytes:
    """Side-by-side income/expense bars per month."""
    fig, ax = _new_figure((6, 3))
    if not history:
        _no_data(ax, "No data")
        return _to_png(fig)

    labels = [d["month"] for d in history]
    incomes = [d.get("income", 0) for d in history]
    expenses = [d.get("expense", 0) for d in history]
    x = list(range(len(labels)))
    w = 0.35
    ax.bar([i - w / 2 for i in x], incomes, w, color=INCOME_COLOR, label="Income")
    ax.bar([i + w / 2 for i in x], expenses, w, color=EXPENSE_COLOR, label="Expenses")
    ax.set_xticks(x)
    ax.set_xticklabels(labels, rotation=45 if len(labels) > 12 else 0, ha="right")
    ax.yaxis.set_major_formatter(
        lambda v, _: f"{v/1000:.0f}k" if abs(v) >= 1000 else f"{v:.0f}"
    )
    ax.legend(fontsize=8)
    return _to_png(fig)
