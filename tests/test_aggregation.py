"""
Testes das agregações (resumo por dia, período, turno, meta)
"""
from datetime import timedelta

import pytest

from conftest import make_sale, make_shift, utc
from models.sale import PaymentMethod
from services.aggregation import (
    achievement_percentage,
    calculate_monthly_period,
    compute_shift_summary,
    payment_breakdown,
    recent_shift_series,
    shift_duration,
    summarize_by_day,
    summarize_period,
)
from services.errors import MalformedRecordError


class TestComputeShiftSummary:
    def test_empty(self):
        """Turno sem corridas: tudo zero e sem formas de pagamento"""
        summary = compute_shift_summary([])

        assert summary.total_sales == 0
        assert summary.ride_count == 0
        assert summary.avg_fare == 0
        assert list(summary.breakdown) == []

    def test_avg_fare_rounds_to_nearest(self):
        sales = [make_sale(300, sale_id=1), make_sale(300, sale_id=2), make_sale(400, sale_id=3)]

        summary = compute_shift_summary(sales)

        assert summary.total_sales == 1000
        assert summary.ride_count == 3
        assert summary.avg_fare == 333

    def test_avg_fare_half_rounds_up(self):
        summary = compute_shift_summary([make_sale(1, sale_id=1), make_sale(2, sale_id=2)])

        assert summary.avg_fare == 2

    def test_breakdown_omits_zero_methods(self):
        """Formas sem valor não aparecem; ordem segue o id da forma"""
        sales = [
            make_sale(1500, method=PaymentMethod.CARD, sale_id=1),
            make_sale(2000, method=PaymentMethod.CASH, sale_id=2),
            make_sale(500, method=PaymentMethod.CARD, sale_id=3),
        ]

        breakdown = compute_shift_summary(sales).breakdown

        assert [(b.method, b.amount) for b in breakdown] == [
            (PaymentMethod.CASH, 2000),
            (PaymentMethod.CARD, 2000),
        ]

    def test_malformed_amount(self):
        with pytest.raises(MalformedRecordError):
            compute_shift_summary([make_sale("1500")])


class TestSummarizeByDay:
    def test_single_shift_example(self):
        shift = make_shift(
            utc(2024, 1, 1, 9, 0),
            utc(2024, 1, 1, 17, 0),
            target=30000,
            sales=[make_sale(1500, method=1, sale_id=1), make_sale(2000, method=3, sale_id=2)],
        )

        days = summarize_by_day([shift])

        assert len(days) == 1
        day = days[0]
        assert day.date == "2024-01-01"
        assert day.day_of_week == "Seg"
        assert day.total_sales == 3500
        assert day.ride_count == 2
        assert day.shift_count == 1
        assert day.start_time == utc(2024, 1, 1, 9, 0)
        assert day.end_time == utc(2024, 1, 1, 17, 0)

    def test_groups_and_orders_descending(self):
        shifts = [
            make_shift(utc(2024, 1, 1, 9), utc(2024, 1, 1, 12), sales=[make_sale(1000)], shift_id=1),
            make_shift(utc(2024, 1, 3, 9), utc(2024, 1, 3, 18), sales=[make_sale(700), make_sale(800, sale_id=2)], shift_id=2),
            make_shift(utc(2024, 1, 1, 14), utc(2024, 1, 1, 20), sales=[make_sale(500)], shift_id=3),
            make_shift(utc(2024, 1, 2, 9), utc(2024, 1, 2, 10), shift_id=4),
        ]

        days = summarize_by_day(shifts)

        assert [d.date for d in days] == ["2024-01-03", "2024-01-02", "2024-01-01"]
        assert sum(d.ride_count for d in days) == sum(len(s.sales) for s in shifts)

        first_day = days[-1]
        assert first_day.shift_count == 2
        assert first_day.total_sales == 1500
        assert first_day.start_time == utc(2024, 1, 1, 9)
        assert first_day.end_time == utc(2024, 1, 1, 20)

    def test_shift_without_sales_still_forms_a_group(self):
        days = summarize_by_day([make_shift(utc(2024, 1, 7, 8), utc(2024, 1, 7, 9))])

        assert days[0].ride_count == 0
        assert days[0].total_sales == 0
        assert days[0].start_time == utc(2024, 1, 7, 8)
        assert days[0].day_of_week == "Dom"

    def test_end_time_absent_when_all_open(self):
        days = summarize_by_day([make_shift(utc(2024, 1, 1, 9))])

        assert days[0].end_time is None

    def test_does_not_mutate_input(self):
        shifts = [
            make_shift(utc(2024, 1, 2, 9), utc(2024, 1, 2, 10), shift_id=1),
            make_shift(utc(2024, 1, 1, 9), utc(2024, 1, 1, 10), shift_id=2),
        ]
        snapshot = list(shifts)

        summarize_by_day(shifts)

        assert shifts == snapshot

    def test_missing_start_time_fails_fast(self):
        with pytest.raises(MalformedRecordError):
            summarize_by_day([make_shift(None)])

    def test_malformed_end_time_fails_fast(self):
        """end_time que não é datetime (linha corrompida) vira MalformedRecordError"""
        with pytest.raises(MalformedRecordError):
            summarize_by_day([make_shift(utc(2024, 1, 1, 9), "2024-01-01T17:00")])


class TestSummarizePeriod:
    def test_filters_half_open_range(self):
        start = utc(2024, 2, 26)
        end = utc(2024, 3, 10, 12)
        shifts = [
            make_shift(utc(2024, 2, 25, 23, 59), sales=[make_sale(9999)], shift_id=1),
            make_shift(start, sales=[make_sale(1000)], shift_id=2),
            make_shift(utc(2024, 3, 1, 9), sales=[make_sale(2000), make_sale(500, sale_id=2)], shift_id=3),
            make_shift(end, sales=[make_sale(7777)], shift_id=4),
        ]

        summary = summarize_period(shifts, start, end, target=10000)

        assert summary.total_sales == 3500
        assert summary.ride_count == 3
        assert summary.achievement == 35

    def test_achievement_clamped(self):
        shifts = [make_shift(utc(2024, 3, 1), sales=[make_sale(5000)])]

        summary = summarize_period(shifts, utc(2024, 3, 1), utc(2024, 4, 1), target=1000)

        assert summary.achievement == 100

    def test_zero_target(self):
        shifts = [make_shift(utc(2024, 3, 1), sales=[make_sale(5000)])]

        assert summarize_period(shifts, utc(2024, 3, 1), utc(2024, 4, 1)).achievement == 0


class TestAchievementPercentage:
    @pytest.mark.parametrize(
        "total,target,expected",
        [
            (0, 30000, 0),
            (15000, 30000, 50),
            (1, 8, 13),  # 12.5 sobe
            (5000, 1000, 100),
            (100, 0, 0),
        ],
    )
    def test_values(self, total, target, expected):
        assert achievement_percentage(total, target) == expected


class TestMonthlyPeriod:
    def test_before_closing_day_starts_previous_month(self):
        period = calculate_monthly_period(25, utc(2024, 3, 10, 9))

        assert period.start == utc(2024, 2, 26)
        assert period.end == utc(2024, 3, 10, 9)
        assert period.label == "2/26 ~ 3/25"

    def test_on_closing_day_still_previous_period(self):
        period = calculate_monthly_period(25, utc(2024, 3, 25, 20))

        assert period.start == utc(2024, 2, 26)

    def test_after_closing_day_starts_this_month(self):
        period = calculate_monthly_period(25, utc(2024, 3, 27))

        assert period.start == utc(2024, 3, 26)
        assert period.label == "3/26 ~ 4/25"

    def test_january_rolls_back_to_december(self):
        period = calculate_monthly_period(20, utc(2024, 1, 5))

        assert period.start == utc(2023, 12, 21)
        assert period.label == "12/21 ~ 1/20"

    def test_missing_day_overflows_to_next_month(self):
        """Fechamento 30 com fevereiro de 29 dias: 31/2 vira 2/3"""
        period = calculate_monthly_period(30, utc(2024, 3, 10))

        assert period.start == utc(2024, 3, 2)

    def test_no_closing_day_covers_everything(self):
        now = utc(2024, 3, 10)
        period = calculate_monthly_period(None, now)

        assert period.start.year == 1970
        assert period.end == now


class TestChartData:
    def test_recent_shift_series_closed_only_oldest_first(self):
        shifts = [
            make_shift(utc(2024, 1, d, 9), utc(2024, 1, d, 18), target=100 * d, sales=[make_sale(d)], shift_id=d)
            for d in range(1, 10)
        ]
        shifts.append(make_shift(utc(2024, 1, 20, 9), shift_id=20))

        series = recent_shift_series(shifts, limit=7)

        assert [p["label"] for p in series] == ["01/03", "01/04", "01/05", "01/06", "01/07", "01/08", "01/09"]
        assert series[-1] == {"label": "01/09", "total_sales": 9, "target_amount": 900}

    def test_payment_breakdown_across_shifts(self):
        shifts = [
            make_shift(utc(2024, 1, 1), sales=[make_sale(1000, method=1), make_sale(300, method=4, sale_id=2)], shift_id=1),
            make_shift(utc(2024, 1, 2), sales=[make_sale(500, method=1, shift_id=2)], shift_id=2),
        ]

        result = {b.method: b.amount for b in payment_breakdown(shifts)}

        assert result == {PaymentMethod.CASH: 1500, PaymentMethod.TICKET: 300}

    def test_shift_duration(self):
        closed = make_shift(utc(2024, 1, 1, 9), utc(2024, 1, 1, 17, 30))

        assert shift_duration(closed) == timedelta(hours=8, minutes=30)
        assert shift_duration(make_shift(utc(2024, 1, 1, 9))) is None

    def test_shift_duration_malformed_end_time(self):
        with pytest.raises(MalformedRecordError):
            shift_duration(make_shift(utc(2024, 1, 1, 9), "17:30"))
