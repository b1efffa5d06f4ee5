import random
from datetime import date
from decimal import Decimal

import pytest

from expense_analytics.core.errors import UnresolvedReference
from expense_analytics.models.records import Category
from expense_analytics.utils.analyzer import SpendingAnalyzer
from conftest import CATEGORIES, FOOD, TRANSPORT, make_record

sample_expenses = [
    make_record("e1", "10", "2024-01-05", FOOD.id),
    make_record("e2", "20", "2024-01-05", FOOD.id),
    make_record("e3", "5", "2024-01-06", TRANSPORT.id),
]

cross_year_expenses = [
    make_record("n1", "12.10", "2024-11-03", FOOD.id),
    make_record("n2", "7.90", "2024-11-28", TRANSPORT.id),
    make_record("d1", "100.00", "2024-12-24", FOOD.id),
    make_record("j1", "0.10", "2025-01-01", FOOD.id),
    make_record("j2", "0.20", "2025-01-31", TRANSPORT.id),
    make_record("f1", "33.33", "2025-02-14", FOOD.id),
]


def test_category_breakdown_example():
    analyzer = SpendingAnalyzer()
    result = [bucket.to_dict() for bucket in analyzer.category_breakdown(sample_expenses, CATEGORIES)]
    by_name = {item["name"]: item for item in result}
    assert set(by_name) == {"Food", "Transport"}
    assert by_name["Food"]["amount"] == 30.0
    assert by_name["Food"]["count"] == 2
    assert by_name["Food"]["color"] == "#FF0000"
    assert by_name["Food"]["icon"] == "utensils"
    assert by_name["Transport"]["amount"] == 5.0
    assert by_name["Transport"]["count"] == 1


def test_daily_trend_example():
    analyzer = SpendingAnalyzer()
    result = [bucket.to_dict() for bucket in analyzer.daily_trend(sample_expenses)]
    assert result == [
        {"date": "2024-01-05", "amount": 30.0, "count": 2},
        {"date": "2024-01-06", "amount": 5.0, "count": 1},
    ]


def test_empty_input_gives_empty_lists():
    analyzer = SpendingAnalyzer()
    assert analyzer.category_breakdown([], CATEGORIES) == []
    assert analyzer.daily_trend([]) == []
    assert analyzer.monthly_comparison([]) == []


def test_unresolved_category_is_raised():
    analyzer = SpendingAnalyzer()
    records = sample_expenses + [make_record("orphan", "1", "2024-01-07", "missing")]
    with pytest.raises(UnresolvedReference) as excinfo:
        analyzer.category_breakdown(records, CATEGORIES)
    assert excinfo.value.expense_id == "orphan"
    assert excinfo.value.category_id == "missing"


def test_same_named_categories_share_a_bucket():
    analyzer = SpendingAnalyzer()
    duplicate = Category(id="cat-food-2", name="Food", color="#0000FF")
    categories = {**CATEGORIES, duplicate.id: duplicate}
    records = [
        make_record("a", "1.50", "2024-03-01", FOOD.id),
        make_record("b", "2.25", "2024-03-02", duplicate.id),
    ]
    result = analyzer.category_breakdown(records, categories)
    assert len(result) == 1
    assert result[0].amount == Decimal("3.75")
    assert result[0].count == 2
    assert result[0].color == FOOD.color


def test_monthly_comparison_orders_across_year_boundary():
    analyzer = SpendingAnalyzer()
    shuffled = list(cross_year_expenses)
    random.Random(7).shuffle(shuffled)
    result = analyzer.monthly_comparison(shuffled)
    assert [bucket.month_label for bucket in result] == ["Nov 2024", "Dec 2024", "Jan 2025", "Feb 2025"]
    assert [(bucket.year, bucket.month) for bucket in result] == [(2024, 11), (2024, 12), (2025, 1), (2025, 2)]
    assert result[0].amount == Decimal("20.00")
    assert result[0].count == 2
    assert result[2].to_dict() == {
        "year": 2025,
        "month": 1,
        "month_label": "Jan 2025",
        "amount": 0.3,
        "count": 2,
    }


def test_sum_and_count_are_conserved():
    analyzer = SpendingAnalyzer()
    expected_total = sum(record.amount for record in cross_year_expenses)
    for buckets in (
        analyzer.category_breakdown(cross_year_expenses, CATEGORIES),
        analyzer.daily_trend(cross_year_expenses),
        analyzer.monthly_comparison(cross_year_expenses),
    ):
        assert sum(bucket.amount for bucket in buckets) == expected_total
        assert sum(bucket.count for bucket in buckets) == len(cross_year_expenses)


def test_many_small_amounts_sum_exactly():
    analyzer = SpendingAnalyzer()
    records = [make_record(f"c{i}", "0.10", "2024-05-01", FOOD.id) for i in range(1000)]
    [bucket] = analyzer.daily_trend(records)
    assert bucket.amount == Decimal("100.00")


def test_order_independence_and_determinism():
    analyzer = SpendingAnalyzer()
    shuffled = list(cross_year_expenses)
    random.Random(42).shuffle(shuffled)

    def as_set(buckets):
        return {tuple(sorted(bucket.to_dict().items(), key=lambda kv: kv[0])) for bucket in buckets}

    assert as_set(analyzer.category_breakdown(shuffled, CATEGORIES)) == as_set(
        analyzer.category_breakdown(cross_year_expenses, CATEGORIES)
    )
    assert analyzer.daily_trend(shuffled) == analyzer.daily_trend(cross_year_expenses)
    assert analyzer.monthly_comparison(shuffled) == analyzer.monthly_comparison(cross_year_expenses)
    assert analyzer.daily_trend(cross_year_expenses) == analyzer.daily_trend(cross_year_expenses)


@pytest.mark.parametrize(
    "current, previous, expected",
    [
        ("0", "100", -100.0),
        ("150", "0", 0.0),
        ("0", "0", 0.0),
        ("150", "100", 50.0),
        ("100", "300", -66.67),
    ],
)
def test_monthly_change_percent(current, previous, expected):
    assert SpendingAnalyzer.monthly_change_percent(Decimal(current), Decimal(previous)) == expected


def test_summarize_with_empty_previous_month():
    analyzer = SpendingAnalyzer()
    current = [make_record("c1", "150", "2025-02-10", FOOD.id)]
    report = analyzer.summarize(current, [], current)
    assert report.monthly_change_percent == 0.0
    assert report.to_dict()["previous_month"] == {"total": 0.0, "count": 0}


def test_summary_from_records_rolls_year_boundary():
    analyzer = SpendingAnalyzer()
    report = analyzer.summary_from_records(cross_year_expenses, today=date(2025, 1, 15))
    assert report.to_dict() == {
        "current_month": {"total": 0.3, "count": 2},
        "previous_month": {"total": 100.0, "count": 1},
        "total_spent": 153.63,
        "total_transactions": 6,
        "monthly_change_percent": -99.7,
    }
