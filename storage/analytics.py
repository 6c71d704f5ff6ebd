"""Aggregates over a user's transactions.

Nothing here is cached: every call rescans the user's transactions through the
transaction store and sums with ``Decimal`` so currency totals stay exact.
"""
from datetime import datetime, time, timedelta
from decimal import Decimal, ROUND_HALF_UP

ZERO = Decimal('0')
WHOLE_UNIT = Decimal('1')


def _sum(transactions, tx_type):
    return sum((t.amount for t in transactions if t.type == tx_type), ZERO)


def _totals(transactions):
    income = _sum(transactions, 'income')
    expense = _sum(transactions, 'expense')
    return {'income': income, 'expense': expense, 'balance': income - expense}


def week_bounds(now, weeks_back=0):
    """Monday 00:00 to Sunday 23:59:59.999999 of the week ``weeks_back`` before ``now``."""
    monday = now.date() - timedelta(days=now.weekday() + 7 * weeks_back)
    start = datetime.combine(monday, time.min)
    end = datetime.combine(monday + timedelta(days=6), time.max)
    return start, end


def week_label(weeks_back):
    if weeks_back == 0:
        return 'This week'
    if weeks_back == 1:
        return '1 week ago'
    return f'{weeks_back} weeks ago'


class AnalyticsAggregator:
    def __init__(self, transactions, users=None):
        self.transactions = transactions
        self.users = users

    def balance(self, user_id):
        return _totals(self.transactions.list_by_user(user_id))

    def category_distribution(self, user_id):
        stats = {}
        for tx in self.transactions.list_by_user(user_id):
            if tx.type != 'expense':
                continue
            entry = stats.setdefault(tx.category, {'category': tx.category, 'total': ZERO, 'count': 0})
            entry['total'] += tx.amount
            entry['count'] += 1
        return sorted(stats.values(), key=lambda e: e['total'], reverse=True)

    def weekly_stats(self, user_id, week_count=4, now=None):
        now = now or datetime.now()
        stats = []
        for i in range(week_count):
            start, end = week_bounds(now, i)
            bucket = _totals(self.transactions.list_by_user_and_range(user_id, start, end))
            bucket.update(week=week_label(i), startDate=start, endDate=end)
            stats.append(bucket)
        return stats

    def averages_by_category(self, user_id, window_days=30, now=None):
        now = now or datetime.now()
        window = self.transactions.list_by_user_and_range(
            user_id, now - timedelta(days=window_days), now
        )

        groups = {}
        for tx in window:
            group = groups.setdefault(
                (tx.type, tx.category),
                {'type': tx.type, 'category': tx.category, 'total': ZERO, 'count': 0},
            )
            group['total'] += tx.amount
            group['count'] += 1

        return [
            {
                'type': g['type'],
                'category': g['category'],
                'averageAmount': (g['total'] / g['count']).quantize(WHOLE_UNIT, rounding=ROUND_HALF_UP),
                'transactionCount': g['count'],
            }
            for g in groups.values()
        ]

    def monthly_summary(self, user_id, now=None):
        now = now or datetime.now()
        start = datetime.combine(now.date().replace(day=1), time.min)
        if start.month == 12:
            next_month = start.replace(year=start.year + 1, month=1)
        else:
            next_month = start.replace(month=start.month + 1)
        end = next_month - timedelta(microseconds=1)

        summary = _totals(self.transactions.list_by_user_and_range(user_id, start, end))
        user = self.users.get_by_id(user_id) if self.users else None
        target = user.monthly_target if user is not None else ZERO
        summary.update(
            month=start.strftime('%Y-%m'),
            target=target,
            remaining=target - summary['balance'],
        )
        return summary
