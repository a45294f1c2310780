import calendar
from datetime import date

import pytest

from aggregation import build_day_records, build_weekly_tracker, month_details, roll_month
from errors import ValidationError
from records import BudgetDay, DayRecord, RosterEntry, SalesEntry, StaffMember
from utils import month_dates

ANN = StaffMember(1, "Ann")
BEN = StaffMember(2, "Ben")
CAL = StaffMember(3, "Cal")
STAFF = [CAL, ANN, BEN]

DAY = date(2024, 3, 1)


def sale(staff, day, hours, actual, target=0, ips=0, avg_sale=0):
    return SalesEntry(staff.id, day, hours, actual, target, ips=ips, avg_sale=avg_sale)


class TestDayRecords:
    def test_rostered_without_sales_is_unsubmitted(self):
        records = build_day_records(
            DAY, STAFF, [RosterEntry(ANN.id, DAY, 10)], [], BudgetDay(DAY, 1000, 100),
        )
        ann = records[0]
        assert ann.name == "Ann"
        assert ann.actual_sales == 0
        assert ann.is_submitted is False
        assert ann.shift_hours == 10
        assert ann.target_sales == 100

    def test_sorted_by_name_ordinal(self):
        staff = [StaffMember(1, "alice"), StaffMember(2, "Zed"), StaffMember(3, "Bob")]
        names = [r.name for r in build_day_records(DAY, staff, [], [], None)]
        assert names == ["Bob", "Zed", "alice"]

    def test_no_budget_no_roster_is_empty_state(self):
        records = build_day_records(DAY, STAFF, [], [], None)
        assert len(records) == 3
        for r in records:
            assert (r.shift_hours, r.actual_sales, r.target_sales, r.ips) == (0, 0, 0, 0)
            assert not r.is_submitted

    def test_sales_hours_win_over_roster(self):
        records = build_day_records(
            DAY, [ANN], [RosterEntry(ANN.id, DAY, 8)], [sale(ANN, DAY, 6, 500)], None,
        )
        assert records[0].shift_hours == 6
        assert records[0].is_submitted

    def test_budget_without_hours_uses_roster_total(self):
        rosters = [RosterEntry(ANN.id, DAY, 6), RosterEntry(BEN.id, DAY, 4)]
        records = build_day_records(DAY, [ANN, BEN], rosters, [], BudgetDay(DAY, 500, None))
        assert [r.target_sales for r in records] == [300, 200]

    def test_persisted_target_kept(self):
        records = build_day_records(
            DAY, [ANN], [RosterEntry(ANN.id, DAY, 10)], [sale(ANN, DAY, 10, 90, target=80)],
            BudgetDay(DAY, 1000, 100),
        )
        assert records[0].target_sales == 80

    def test_rows_for_other_dates_ignored(self):
        other = date(2024, 3, 2)
        records = build_day_records(DAY, [ANN], [RosterEntry(ANN.id, other, 8)], [sale(ANN, other, 8, 100)], None)
        assert records[0].shift_hours == 0
        assert not records[0].is_submitted


class TestRollMonth:
    def test_leap_february_has_29_days(self):
        summary = roll_month(2024, 2, STAFF, [], [], [])
        assert len(summary.daily_budgets) == 29
        assert summary.daily_budgets[0].date == date(2024, 2, 1)
        assert summary.daily_budgets[-1].date == date(2024, 2, 29)

    @pytest.mark.parametrize("year", [1900, 2000, 2023, 2024])
    @pytest.mark.parametrize("month", range(1, 13))
    def test_day_series_covers_month(self, year, month):
        summary = roll_month(year, month, [], [], [], [])
        assert len(summary.daily_budgets) == calendar.monthrange(year, month)[1]

    def test_invalid_month_rejected(self):
        with pytest.raises(ValidationError):
            roll_month(2024, 13, STAFF, [], [], [])

    def test_averages_ignore_zero_days(self):
        days = [date(2024, 3, d) for d in (1, 2, 3, 4)]
        sales = [sale(ANN, d, 5, 100, ips=ips, avg_sale=avg) for d, ips, avg in zip(days, [0, 2.0, 0, 1.0], [0, 30, 40, 0])]
        summary = roll_month(2024, 3, [ANN], [], sales, [])
        ann = summary.staff[0]
        assert ann.avg_ips == 1.5
        assert ann.avg_sale_val == 35
        assert ann.total_sales == 400
        assert ann.total_hours == 20

    def test_no_metric_days_average_zero(self):
        summary = roll_month(2024, 3, [ANN], [], [], [])
        assert summary.staff[0].avg_ips == 0
        assert summary.staff[0].avg_sale_val == 0

    def test_totals_use_filled_targets(self):
        rosters = [RosterEntry(ANN.id, DAY, 10), RosterEntry(BEN.id, DAY, 10)]
        sales = [sale(ANN, DAY, 10, 120, target=90)]
        summary = roll_month(2024, 3, [ANN, BEN], rosters, sales, [BudgetDay(DAY, 1000, 20)])
        ann, ben = summary.staff
        assert ann.total_target == 90
        assert ben.total_target == 500
        assert ben.total_hours == 10

    def test_store_totals_include_gap_days(self):
        budgets = [BudgetDay(date(2024, 4, 1), 1000, 40), BudgetDay(date(2024, 4, 2), 800, None)]
        rosters = [RosterEntry(ANN.id, date(2024, 4, 2), 8), RosterEntry(BEN.id, date(2024, 4, 3), 6)]
        summary = roll_month(2024, 4, [ANN, BEN], rosters, [], budgets)
        assert summary.store.total_budget == 1800
        assert summary.store.total_hours == 40 + 8 + 6
        gap = summary.daily_budgets[2]
        assert gap == BudgetDay(date(2024, 4, 3), 0, 6)
        assert summary.daily_budgets[10] == BudgetDay(date(2024, 4, 11), 0, 0)

    def test_staff_sorted_by_name(self):
        summary = roll_month(2024, 3, STAFF, [], [], [])
        assert [s.name for s in summary.staff] == ["Ann", "Ben", "Cal"]

    def test_idempotent(self):
        args = (2024, 3, STAFF, [RosterEntry(ANN.id, DAY, 8)], [sale(BEN, DAY, 4, 300, ips=1.2)], [BudgetDay(DAY, 900, None)])
        assert roll_month(*args) == roll_month(*args)

    def test_details_grid_is_days_by_staff(self):
        details = month_details(2023, 2, STAFF, [], [], [])
        assert len(details) == 28 * 3
        assert details[0].date == date(2023, 2, 1)
        assert [d.name for d in details[:3]] == ["Ann", "Ben", "Cal"]


def record(day, actual, target):
    return DayRecord(ANN.id, ANN.name, day, 8, actual, target, 0, 0, 0, True)


class TestWeeklyTracker:
    def test_month_starting_wednesday(self):
        # May 2024 starts on a Wednesday
        weeks = build_weekly_tracker(month_dates(2024, 5), [])
        assert [len(w.days) for w in weeks] == [5, 7, 7, 7, 5]
        assert weeks[0].days[0].date == date(2024, 5, 1)
        assert weeks[0].days[-1].date == date(2024, 5, 5)
        assert weeks[1].days[0].date.weekday() == 0

    def test_empty_month_has_zero_weeks(self):
        weeks = build_weekly_tracker(month_dates(2024, 2), [])
        assert sum(len(w.days) for w in weeks) == 29
        for week in weeks:
            assert week.week_actual == 0 and week.week_target == 0
            assert all(d.running_actual == 0 and d.running_variance == 0 for d in week.days)

    def test_running_totals_carry_across_weeks(self):
        records = [
            record(date(2024, 5, 1), 100, 80),
            record(date(2024, 5, 5), 50, 70),
            record(date(2024, 5, 6), 200, 100),
        ]
        weeks = build_weekly_tracker(month_dates(2024, 5), records)
        first, second = weeks[0], weeks[1]
        assert (first.week_actual, first.week_target) == (150, 150)
        assert first.days[0].running_actual == 100
        assert first.days[0].running_variance == 20
        assert first.days[-1].running_variance == 0
        monday = second.days[0]
        assert monday.variance == 100
        assert (monday.running_actual, monday.running_target, monday.running_variance) == (350, 250, 100)
        assert second.days[-1].running_actual == 350
        assert weeks[-1].days[-1].running_target == 250

    def test_month_starting_monday(self):
        # April 2024 starts on a Monday
        weeks = build_weekly_tracker(month_dates(2024, 4), [])
        assert [len(w.days) for w in weeks] == [7, 7, 7, 7, 2]
        assert [w.number for w in weeks] == [1, 2, 3, 4, 5]
