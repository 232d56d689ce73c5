import json

import pytest

from main import App, build_parser, main
from utils.errors import ImportFormatError


@pytest.fixture
def run(tmp_path, capsys):
    db_path = str(tmp_path / "cli.db")

    def _run(*argv):
        code = main(["--db", db_path, *argv])
        out, err = capsys.readouterr()
        return code, out, err
    return _run


def test_add_list_and_summary(run):
    code, out, _ = run("add", "--date", "2025-02-10", "--description", "LIDL",
                       "--amount", "14.64", "--category", "Groceries")
    assert code == 0
    assert "LIDL" in out and "-€14.64" in out

    run("add", "--date", "2025-02-28", "--description", "Salary", "--amount", "2500",
        "--type", "income", "--category", "Salary")

    _, out, _ = run("list", "--month", "2025-02")
    assert "LIDL" in out and "Salary" in out

    _, out, _ = run("summary", "--month", "2025-02")
    assert "February 2025" in out
    assert "+€2,485.36" in out
    assert "Groceries" in out


def test_edit_keeps_unspecified_fields(run):
    run("add", "--date", "2025-02-10", "--description", "LIDL", "--amount", "14.64",
        "--category", "Groceries", "--payment", "Card")
    code, out, _ = run("edit", "1", "--amount", "20")
    assert code == 0
    assert "-€20.00" in out

    _, out, _ = run("list", "--month", "2025-02")
    assert "Card" in out and "Groceries" in out


def test_validation_error_exits_nonzero(run):
    code, _, err = run("add", "--date", "2025-02-10", "--description", "LIDL", "--amount", "abc")
    assert code == 1
    assert err.startswith("Error:")

    code, _, err = run("delete", "7")
    assert code == 1


def test_apply_recurring_with_explicit_today(run):
    run("recurring", "add", "--description", "Rent", "--amount", "800",
        "--frequency", "monthly", "--next-due", "2099-01-31")
    code, out, _ = run("apply-recurring", "--today", "2099-02-15")
    assert code == 0
    assert "Added 1 recurring transaction(s)." in out

    _, out, _ = run("recurring", "list")
    assert "next 2099-03-15" in out

    code, _, err = run("apply-recurring", "--today", "15/02/2099")
    assert code == 1


def test_export_import_round_trip(run, tmp_path):
    run("add", "--date", "2025-02-10", "--description", "LIDL", "--amount", "14.64")
    path = tmp_path / "backup.json"
    run("export", str(path))
    data = json.loads(path.read_text(encoding="utf-8"))
    assert set(data) == {"transactions", "recurringTransactions"}

    run("clear")
    code, out, _ = run("import", str(path), "--mode", "replace")
    assert code == 0
    assert "Imported 1 transaction(s)" in out


def test_import_rejects_invalid_json(run, tmp_path):
    path = tmp_path / "broken.json"
    path.write_text("{oops", encoding="utf-8")
    code, _, err = run("import", str(path))
    assert code == 1
    assert "not valid JSON" in err


def test_chart_writes_png(run, tmp_path):
    path = tmp_path / "chart.png"
    assert run("chart", str(path), "--month", "2025-02")[0] == 0
    assert path.read_bytes().startswith(b"\x89PNG")


def test_categories_lists_vocabulary(run):
    code, out, _ = run("categories", "--type", "income")
    assert code == 0
    assert out.startswith("Income:")
    assert "Groceries" not in out


def test_recurring_edit_keeps_unspecified_fields(run):
    run("recurring", "add", "--description", "Gym", "--amount", "30", "--category", "Sport",
        "--payment", "Card", "--frequency", "monthly", "--next-due", "2099-01-01")
    code, out, _ = run("recurring", "edit", "1", "--amount", "35", "--next-due", "2099-02-01")
    assert code == 0
    assert "-€35.00" in out and "next due 2099-02-01" in out

    _, out, _ = run("recurring", "list")
    assert "MONTHLY" in out and "Gym" in out

    code, _, err = run("recurring", "edit", "1", "--next-due", "2099-2-1")
    assert code == 1 and err.startswith("Error:")
    code, _, _ = run("recurring", "edit", "9", "--amount", "1")
    assert code == 1


def test_invalid_json_import_is_an_import_format_error(db, tmp_path):
    path = tmp_path / "broken.json"
    path.write_text("[1, 2", encoding="utf-8")
    args = build_parser().parse_args(["import", str(path)])
    with pytest.raises(ImportFormatError, match="not valid JSON"):
        App(db).cmd_import(args)
