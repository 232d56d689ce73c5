from services.chart_service import render_category_pie, render_monthly_bars

PNG_MAGIC = b"\x89PNG\r\n\x1a\n"


def test_pie_chart_renders_png():
    png = render_category_pie([("Groceries", 42.5), ("Public Transport", 10.35)], "2025-12")
    assert png.startswith(PNG_MAGIC)


def test_pie_chart_placeholder_when_empty():
    assert render_category_pie([]).startswith(PNG_MAGIC)


def test_bar_chart_renders_png():
    history = [
        {"month": "2025-01", "income": 0.0, "expense": 100.0, "net": -100.0},
        {"month": "2025-02", "income": 2500.0, "expense": 50.0, "net": 2450.0},
    ]
    assert render_monthly_bars(history).startswith(PNG_MAGIC)
    assert render_monthly_bars([]).startswith(PNG_MAGIC)
