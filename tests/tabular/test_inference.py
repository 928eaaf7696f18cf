from datetime import date, datetime
from decimal import Decimal
import numpy as np
import pandas as pd
import pytest

from src.tabular.inference import (
    ColumnType,
    infer_column,
    infer_types,
    is_date_cell,
    is_number_cell,
)
from src.tabular.result_set import ResultSet

N, D, T = ColumnType.NUMBER, ColumnType.DATE, ColumnType.TEXT

def test_one_type_per_column_in_order(sales):
    types = infer_types(sales)
    assert len(types) == len(sales.columns)
    assert types == [D, T, N, N]

def test_id_name_example(people):
    assert infer_types(people) == [N, T]

def test_zero_rows_defaults_to_text():
    rs = ResultSet.from_rows(["a", "b", "c"], [])
    assert infer_types(rs) == [T, T, T]

def test_zero_columns():
    assert infer_types(ResultSet(columns=())) == []

def test_number_priority_over_epoch_like_ints():
    # these would also be accepted as epoch timestamps by lenient parsers
    rs = ResultSet.from_rows(["ts"], [[1704067200], [1704153600], [20240101]])
    assert infer_types(rs) == [N]

@pytest.mark.parametrize("cells", [
    [1, 2.5, -3],
    [Decimal("1.10"), 2],
    [np.int64(4), np.float32(1.5)],
    [float("nan"), 1.0],
])
def test_runtime_numbers_are_number(cells):
    assert infer_column(cells) == N

@pytest.mark.parametrize("cells,expected", [
    (["1", "2"], T),          # numeric-looking text is never NUMBER nor DATE
    ([1, "2"], T),            # one string disqualifies NUMBER
    ([1, None], T),           # null is not numeric
    ([True, False], T),       # booleans are not numbers
])
def test_no_numeric_coercion_from_text(cells, expected):
    assert infer_column(cells) == expected

def test_all_or_nothing_date():
    assert infer_column(["2024-01-01", "not-a-date"]) == T
    assert infer_column(["2024-01-01", "2024-02-29 12:30:00"]) == D

@pytest.mark.parametrize("bad", ["", "   ", None])
def test_empty_or_missing_disqualifies_date(bad):
    assert infer_column(["2024-01-01", bad]) == T

def test_date_objects_are_dates():
    assert infer_column([date(2024, 1, 1), datetime(2024, 1, 2, 3, 4)]) == D
    assert infer_column([pd.Timestamp("2024-01-01")]) == D

def test_mixed_date_objects_and_strings():
    assert infer_column([date(2024, 1, 1), "2024-03-05"]) == D

def test_cell_predicates():
    assert is_number_cell(0)
    assert not is_number_cell(True)
    assert not is_number_cell("3")
    assert not is_number_cell(1 + 2j)
    assert is_date_cell("2024-01-01T10:00:00")
    assert not is_date_cell("12")
    assert not is_date_cell("-2.5e3")
    assert not is_date_cell("hello")
    assert not is_date_cell(20240101)

def test_pure_and_repeatable(sales):
    assert infer_types(sales) == infer_types(sales)

@pytest.mark.parametrize("s", ["M5", "May", "March", "now", "today", "1st", "2024Q1", "June", "2024"])
def test_strings_without_calendar_structure_are_not_dates(s):
    assert not is_date_cell(s)

@pytest.mark.parametrize("s", ["2024-01-31", "01/31/2024", "2024/1/5", "Jan 31, 2024", "31 March 2024", "2024-01-31 08:15"])
def test_calendar_strings_are_dates(s):
    assert is_date_cell(s)

def test_product_codes_stay_text_and_label_the_chart():
    from src.chart.projector import project
    rs = ResultSet.from_rows(["model", "units"], [["M5", 3], ["M3", 7]])
    assert infer_types(rs) == [T, N]
    assert project(rs).category_labels == ("M5", "M3")
