from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest
from conftest import AKL, span
from hypothesis import given, settings, strategies as st

from pagertally.attribution import (
    attribute_shift,
    build_deciders,
    intersector_for,
    process_schedule_user_shifts,
    remove_matched_spans,
)
from pagertally.config import reporting_period
from pagertally.core.errors import PagerTallyValueError
from pagertally.datasources import (
    AfterHoursSource,
    CompanyDaySource,
    PublicHolidaySource,
    StaticSource,
    WeekendSource,
)
from pagertally.timespan import AttributedSpan, Category, Span, User, merge_spans

EMPTY = StaticSource()

DECEMBER_SHIFTS = {
    User("User1", "Pacific/Auckland"): [
        span("2018-12-05 17:00", "2018-12-06 08:00"),
        span("2018-12-06 15:30", "2018-12-06 18:00"),
        span("2018-12-07 17:00", "2018-12-08 21:00"),
        span("2018-12-13 17:00", "2018-12-14 17:00"),
    ],
    User("User2", "Pacific/Auckland"): [
        span("2018-12-03 17:00", "2018-12-05 17:00"),
        span("2018-12-18 17:00", "2018-12-19 17:00"),
        span("2018-12-26 17:00", "2018-12-27 17:00"),
        span("2018-12-31 17:00", "2019-01-01 00:00"),
    ],
}


def _sources(company=EMPTY, stat=EMPTY, weekend=EMPTY, after_hours=EMPTY):
    return [company, stat, weekend, after_hours]


def test_weekend_claims_the_whole_shift():
    shift = span("2019-01-04 17:00", "2019-01-07 09:00")
    breakdown = attribute_shift([shift], _sources(weekend=StaticSource([shift])))
    assert breakdown == [AttributedSpan(shift, Category.WEEKEND)]
    assert breakdown.weekend_dur() == timedelta(hours=64)


def test_company_day_beats_stat_holiday():
    day = span("2019-12-24 00:00", "2019-12-25 00:00")
    holiday = span("2019-12-24 00:00", "2019-12-26 00:00")
    breakdown = attribute_shift(
        [day], _sources(company=StaticSource([day]), stat=StaticSource([holiday]))
    )
    assert breakdown == [AttributedSpan(day, Category.COMPANY_DAY)]
    assert breakdown.company_day_dur() == timedelta(hours=24)
    assert breakdown.company_day_count() == 1
    assert breakdown.stat_dur() == timedelta()


def test_unclaimed_time_is_business_hours():
    shift = span("2019-01-07 07:00", "2019-01-07 10:00")
    breakdown = attribute_shift(
        [shift], _sources(after_hours=StaticSource([span("2019-01-07 00:00", "2019-01-07 08:00")]))
    )
    assert breakdown == [
        AttributedSpan(span("2019-01-07 07:00", "2019-01-07 08:00"), Category.AFTER_HOURS),
        AttributedSpan(span("2019-01-07 08:00", "2019-01-07 10:00"), Category.BUSINESS),
    ]
    assert breakdown.after_hours_dur() == timedelta(hours=1)
    assert breakdown.business_hours_dur() == timedelta(hours=2)
    assert breakdown.total_dur() == timedelta(hours=3)


def test_no_shifts_gives_empty_breakdown():
    assert attribute_shift([], _sources()) == []
    assert attribute_shift([span("2019-01-07 07:00", "2019-01-07 07:00")], _sources()) == []


def test_shift_split_around_a_holiday_keeps_every_fragment():
    shift = span("2018-12-24 12:00", "2018-12-26 12:00")
    holiday = span("2018-12-25 00:00", "2018-12-26 00:00")
    breakdown = attribute_shift([shift], _sources(stat=StaticSource([holiday])))
    assert breakdown == [
        AttributedSpan(span("2018-12-24 12:00", "2018-12-25 00:00"), Category.BUSINESS),
        AttributedSpan(holiday, Category.STAT_HOLIDAY),
        AttributedSpan(span("2018-12-26 00:00", "2018-12-26 12:00"), Category.BUSINESS),
    ]


def test_duplicated_source_spans_are_not_double_counted():
    shift = span("2018-12-25 06:00", "2018-12-25 18:00")
    holiday = span("2018-12-25 00:00", "2018-12-26 00:00")
    breakdown = attribute_shift(
        [shift], _sources(stat=StaticSource([holiday, holiday, span("2018-12-25 10:00", "2018-12-25 20:00")]))
    )
    assert breakdown == [AttributedSpan(shift, Category.STAT_HOLIDAY)]


def test_consecutive_company_days_count_separately():
    shift = span("2018-12-27 00:00", "2018-12-29 00:00")
    days = [span("2018-12-27 00:00", "2018-12-28 00:00"), span("2018-12-28 00:00", "2018-12-29 00:00")]
    breakdown = attribute_shift([shift], _sources(company=StaticSource(days)))
    assert breakdown.company_day_count() == 2
    assert breakdown.company_day_dur() == timedelta(hours=48)


def test_remove_matched_spans_uses_union_of_matches():
    remaining = [span("2019-01-01 00:00", "2019-01-02 00:00")]
    matches = [
        AttributedSpan(span("2019-01-01 00:00", "2019-01-01 08:00"), Category.AFTER_HOURS),
        AttributedSpan(span("2019-01-01 06:00", "2019-01-01 09:00"), Category.AFTER_HOURS),
        AttributedSpan(span("2019-01-01 17:30", "2019-01-02 00:00"), Category.AFTER_HOURS),
    ]
    assert remove_matched_spans(remaining, matches) == [span("2019-01-01 09:00", "2019-01-01 17:30")]
    assert remove_matched_spans(remaining, []) == remaining


def test_intersector_ignores_touching_spans():
    decide = intersector_for(Category.WEEKEND, [span("2019-01-04 17:30", "2019-01-07 08:00")])
    assert decide([span("2019-01-04 08:00", "2019-01-04 17:30")]) == []
    assert decide([span("2019-01-07 08:00", "2019-01-07 17:30")]) == []


def test_build_deciders_requires_one_source_per_category():
    with pytest.raises(PagerTallyValueError):
        build_deciders([EMPTY, EMPTY])


BASE = datetime(2019, 1, 7, tzinfo=UTC)


@st.composite
def minute_spans(draw, horizon: int = 7 * 24 * 60):
    start = draw(st.integers(min_value=0, max_value=horizon))
    length = draw(st.integers(min_value=0, max_value=36 * 60))
    return Span(BASE + timedelta(minutes=start), BASE + timedelta(minutes=start + length))


@settings(max_examples=100, deadline=None)
@given(
    shifts=st.lists(minute_spans(), max_size=5),
    category_spans=st.lists(st.lists(minute_spans(), max_size=6), min_size=4, max_size=4),
)
def test_breakdown_is_a_disjoint_partition_of_the_shifts(shifts, category_spans):
    raw = merge_spans(shifts)
    breakdown = attribute_shift(raw, [StaticSource(spans) for spans in category_spans])

    assert breakdown.total_dur() == sum((s.duration for s in raw), timedelta())
    starts = [item.start for item in breakdown]
    assert starts == sorted(starts)
    for earlier, later in zip(breakdown, breakdown[1:]):
        assert earlier.end <= later.start
    for item in breakdown:
        assert not item.span.is_zero
        assert any(shift.contains(item.span) for shift in raw)


@settings(max_examples=50, deadline=None)
@given(shift=minute_spans(), claimed=st.lists(minute_spans(), max_size=6))
def test_highest_priority_category_wins(shift, claimed):
    breakdown = attribute_shift([shift], _sources(company=StaticSource(claimed), stat=StaticSource(claimed)))
    assert breakdown.stat_dur() == timedelta()


@settings(max_examples=50, deadline=None)
@given(shift=minute_spans().filter(lambda s: not s.is_zero))
def test_company_day_beats_weekend_covering_the_shift(shift):
    weekend = shift.encompass(shift.offset(timedelta(hours=12)))
    breakdown = attribute_shift([shift], _sources(company=StaticSource([shift]), weekend=StaticSource([weekend])))
    assert breakdown == [AttributedSpan(shift, Category.COMPANY_DAY)]
    assert breakdown.weekend_dur() == timedelta()
    assert breakdown.count_of(Category.COMPANY_DAY) == 1


def _december_sources(config, period, ics):
    return [
        CompanyDaySource(config, period),
        PublicHolidaySource(config, period, ics_text=ics),
        WeekendSource(config, period),
        AfterHoursSource(config, period),
    ]


def test_december_2018_totals(akl_config, december_2018, holidays_ics):
    sources = _december_sources(akl_config, december_2018, holidays_ics)
    results = process_schedule_user_shifts({"Platform Team": DECEMBER_SHIFTS}, sources)

    user1, user2 = results["Platform Team"]
    assert [user1.user.name, user2.user.name] == ["User1", "User2"]
    assert all(result.is_balanced() for result in (user1, user2))
    assert user1.breakdown.total_dur() + user2.breakdown.total_dur() == timedelta(hours=172, minutes=30)

    assert user1.breakdown.business_hours_dur() == timedelta(hours=12, minutes=30)
    assert user1.breakdown.after_hours_dur() == timedelta(hours=29, minutes=30)
    assert user1.breakdown.weekend_dur() == timedelta(hours=27, minutes=30)

    assert user2.breakdown.business_hours_dur() == timedelta(hours=28, minutes=30)
    assert user2.breakdown.after_hours_dur() == timedelta(hours=43, minutes=30)
    assert user2.breakdown.stat_dur() == timedelta(hours=7)
    assert user2.breakdown.company_day_dur() == timedelta(hours=24)
    assert user2.breakdown.company_day_count() == 2


def test_thread_pool_gives_identical_results(akl_config, december_2018, holidays_ics):
    sources = _december_sources(akl_config, december_2018, holidays_ics)
    user1_shifts = DECEMBER_SHIFTS[User("User1", "Pacific/Auckland")]
    shifts = {"Platform Team": DECEMBER_SHIFTS, "Database": {User("User3"): user1_shifts}}
    serial = process_schedule_user_shifts(shifts, sources)
    threaded = process_schedule_user_shifts(shifts, sources, max_workers=4)
    assert serial == threaded
    assert list(threaded) == ["Platform Team", "Database"]


def test_daylight_saving_weekend_keeps_elapsed_time(akl_config):
    # NZDT ends at 03:00 on Sunday 7 April 2019; that weekend lasts an extra hour.
    april = reporting_period(AKL, "April", 2019)
    shift = Span(
        datetime.fromisoformat("2019-04-05T09:00:00+13:00"),
        datetime.fromisoformat("2019-04-08T09:00:00+12:00"),
    )
    sources = _sources(weekend=WeekendSource(akl_config, april), after_hours=AfterHoursSource(akl_config, april))

    results = process_schedule_user_shifts({"Platform Team": {User("User1"): [shift]}}, sources)
    (result,) = results["Platform Team"]
    assert result.is_balanced()
    assert result.breakdown.total_dur() == timedelta(hours=73)
    assert result.breakdown.weekend_dur() == timedelta(hours=63, minutes=30)
    assert result.breakdown.business_hours_dur() == timedelta(hours=9, minutes=30)
    assert result.breakdown.after_hours_dur() == timedelta()
