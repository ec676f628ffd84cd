import json

from lms.datafile import LoadResult, SkippedLine
from lms.patron import Patron
from lms.ui_helpers import get_output_mode, print_find_result, print_list_result, print_load_result, set_output_mode


def test_set_output_mode_ignores_unknown_values():
    assert set_output_mode("JSON") is True
    assert get_output_mode() == "json"
    assert set_output_mode("yaml") is False
    assert get_output_mode() == "json"


def test_plain_list(capsys):
    print_list_result([Patron(1000001, "Alice", "1 Elm St", 2)])
    out = capsys.readouterr().out
    assert "----- Patron List -----" in out
    assert "Patron ID: 1000001, Name: Alice, Address: 1 Elm St, Overdue Fine: $2.00" in out


def test_json_list_and_empty(capsys):
    set_output_mode("json")
    print_list_result([Patron(1000001, "Alice", "1 Elm St", 2)])
    print_list_result([])
    first, second = capsys.readouterr().out.splitlines()
    assert json.loads(first)[0]["patron_id"] == 1000001
    assert json.loads(second) == []


def test_rich_find_renders_panel(capsys):
    set_output_mode("rich")
    print_find_result(Patron(1000001, "Alice [admin]", "1 Elm St", 2))
    out = capsys.readouterr().out
    assert "Patron Found" in out
    assert "Alice [admin]" in out


def test_plain_load_result_with_error(capsys):
    print_load_result("patrons.txt", LoadResult(error="No such file"))
    assert capsys.readouterr().out.strip() == "Error loading file: No such file"


def test_plain_load_result_verbose(capsys):
    result = LoadResult(loaded_count=2, skipped_count=1, skipped_lines=[SkippedLine(4, "duplicate patron id: 1000001")])
    print_load_result("patrons.txt", result, verbose=True)
    out = capsys.readouterr().out
    assert "Loaded patrons: 2" in out
    assert "Skipped rows: 1" in out
    assert "line 4: duplicate patron id: 1000001" in out
