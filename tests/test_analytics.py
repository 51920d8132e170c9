from datetime import date

from expense_analytics.analytics import AnalyticsReport, TransactionAnalytics
from expense_analytics.bucketing import bucket_for
from expense_analytics.models import Granularity, PaymentChannel, Transaction, TransactionKind

TODAY = date(2024, 1, 7)


def sample_snapshot():
    return [
        Transaction('t2', TransactionKind.EXPENSE, 'Groceries', 30, 'Food', '2024-01-02'),
        Transaction('t1', TransactionKind.EXPENSE, 'Lunch', 50, 'Food', '2024-01-01', payment_channel=PaymentChannel.CASH),
        Transaction('t3', TransactionKind.INCOME, 'Pay', 1000, 'Salary', '2024-01-01'),
        Transaction('t4', TransactionKind.EXPENSE, 'Bus', 5, 'Travel', '2024-01-01'),
    ]


def test_report_bundles_every_view():
    analytics = TransactionAnalytics(sample_snapshot(), today=TODAY)
    report = analytics.report(Granularity.DAILY)

    assert isinstance(report, AnalyticsReport)
    assert report.category_totals == {'Food': 80.0, 'Travel': 5.0}
    assert [item.category for item in report.ranked_categories] == ['Food', 'Travel']
    assert report.total_expense == 85.0
    assert report.balances.cash == -50.0
    assert report.balances.non_cash == 965.0
    assert report.series.keys[0] == '2024-01-01'
    assert report.series.keys[-1] == '2024-01-07'
    assert report.category_slots == {'Food': 0, 'Salary': 1, 'Travel': 2}
    assert round(report.percentage('Travel'), 4) == round(5 / 85 * 100, 4)
    assert report.percentage('Unknown') == 0.0


def test_analytics_does_not_mutate_snapshot():
    snapshot = sample_snapshot()
    analytics = TransactionAnalytics(snapshot, today=TODAY)
    analytics.report(Granularity.WEEKLY)
    analytics.report(Granularity.MONTHLY)
    assert analytics.snapshot == tuple(snapshot)
    assert list(analytics.data['id']) == ['t2', 't1', 't3', 't4']


def test_deleting_a_transaction_reduces_totals_exactly():
    before = TransactionAnalytics(sample_snapshot(), today=TODAY)
    after = before.without('t1')

    assert before.category_totals()['Food'] - after.category_totals()['Food'] == 50.0
    assert bucket_for(before.buckets(), '2024-01-01').total - bucket_for(after.buckets(), '2024-01-01').total == 50.0
    assert after.balances().cash == 0.0


def test_deleting_last_transaction_of_a_category_leaves_no_residue():
    after = TransactionAnalytics(sample_snapshot(), today=TODAY).without('t4')

    assert 'Travel' not in after.category_totals()
    series = after.buckets(Granularity.DAILY)
    assert 'Travel' not in series.categories
    assert all('Travel' not in bucket.by_category for bucket in series)


def test_search_and_colors_through_facade():
    analytics = TransactionAnalytics(sample_snapshot(), today=TODAY)
    assert [t.id for t in analytics.search('food', 'cash')] == ['t1']
    assert analytics.category_colors(['x', 'y']) == {'Food': 'x', 'Salary': 'y', 'Travel': 'x'}


def test_empty_snapshot_report():
    report = TransactionAnalytics([], today=TODAY).report(Granularity.DAILY)
    assert report.category_totals == {}
    assert report.ranked_categories == []
    assert report.total_expense == 0.0
    assert report.balances.total == 0.0
    assert len(report.series) == 7
    assert report.percentage('Food') == 0.0
