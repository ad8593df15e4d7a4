"""Interval attribution engine.

Every raw shift span is partitioned into category-tagged sub-spans. Categories are
claimed in priority order (company day, statutory holiday, weekend, after-hours); each
pass keeps the intersections of the still-unclaimed shift fragments with the
category's spans and removes them from the working set. Whatever survives the last
pass is business hours. The result is disjoint and preserves total duration.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Sequence
from concurrent.futures import ThreadPoolExecutor
from datetime import timedelta

from pagertally.core.errors import PagerTallyValueError
from pagertally.datasources.base import CategorySource
from pagertally.timespan import (
    AttributedSpan,
    AttributedSpans,
    Category,
    ScheduleName,
    ScheduleUserShifts,
    Span,
    User,
    UserShiftResult,
    deduplicate,
    merge_spans,
    subtract_spans,
    total_duration,
)

logger = logging.getLogger(__name__)

ATTRIBUTION_ORDER: tuple[Category, ...] = (
    Category.COMPANY_DAY,
    Category.STAT_HOLIDAY,
    Category.WEEKEND,
    Category.AFTER_HOURS,
)
CATCH_ALL = Category.BUSINESS

Intersector = Callable[[Sequence[Span]], list[AttributedSpan]]


def business_hours_intersector(spans: Sequence[Span]) -> list[AttributedSpan]:
    """Claim every remaining span as business hours."""
    return [AttributedSpan(span, CATCH_ALL) for span in spans]


def intersector_for(category: Category, match_spans: Iterable[Span]) -> Intersector:
    """Build an intersector emitting ``category`` for every overlap with ``match_spans``.

    Overlapping match spans are coalesced first so a duplicated source event cannot
    claim the same instant twice. Bordering spans stay separate: each still counts as
    its own span (e.g. two consecutive company days).
    """
    canonical = [span for span in merge_spans(match_spans, bordering=False) if not span.is_zero]

    def _intersect(test_spans: Sequence[Span]) -> list[AttributedSpan]:
        matches: list[AttributedSpan] = []
        for test_span in test_spans:
            for match in canonical:
                if match.utc_start >= test_span.utc_end:
                    break
                portion = test_span.intersection(match)
                if portion is not None and not portion.is_zero:
                    matches.append(AttributedSpan(portion, category))
        return matches

    return _intersect


def remove_matched_spans(spans: Sequence[Span], matches: Sequence[AttributedSpan]) -> list[Span]:
    """Return the parts of ``spans`` not covered by any of ``matches``.

    All matches of a pass are merged into one canonical union, which is then subtracted
    from each span in a single linear sweep. A span may leave zero, one or several
    fragments behind.
    """
    if not matches:
        return list(spans)
    union = merge_spans(match.span for match in matches)
    leftovers = [fragment for span in spans for fragment in subtract_spans(span, union)]
    return deduplicate(leftovers)


def build_deciders(
    sources: Sequence[CategorySource],
    categories: Sequence[Category] = ATTRIBUTION_ORDER,
) -> list[Intersector]:
    """Pair each source with its category and append the business-hours catch-all."""
    if len(sources) != len(categories):
        raise PagerTallyValueError(
            f"expected {len(categories)} category sources ({', '.join(c.name for c in categories)}), "
            f"got {len(sources)}"
        )
    deciders: list[Intersector] = [
        intersector_for(category, source.spans()) for category, source in zip(categories, sources)
    ]
    deciders.append(business_hours_intersector)
    return deciders


def _run_deciders(raw_spans: Iterable[Span], deciders: Sequence[Intersector]) -> AttributedSpans:
    remaining = [span for span in raw_spans if not span.is_zero]
    output: list[AttributedSpan] = []
    for decider in deciders:
        if not remaining:
            break
        matches = decider(remaining)
        output.extend(matches)
        remaining = remove_matched_spans(remaining, matches)
    return AttributedSpans(output).sorted()


def attribute_shift(
    raw_spans: Iterable[Span],
    sources: Sequence[CategorySource],
    categories: Sequence[Category] = ATTRIBUTION_ORDER,
) -> AttributedSpans:
    """Partition a user's shift spans into category-tagged spans.

    Parameters
    ----------
    raw_spans:
        The user's shifts. They are expected to be merged and non-overlapping already;
        zero-length spans are ignored.
    sources:
        Category sources ordered by descending priority, one per entry of ``categories``
        (by default company days, public holidays, weekends, after-hours).
    categories:
        Category attributed to each source.

    Returns
    -------
    AttributedSpans
        Start-ordered, pairwise disjoint spans whose total duration equals that of
        ``raw_spans``. Time claimed by no source is :attr:`Category.BUSINESS`.
    """
    return _run_deciders(raw_spans, build_deciders(sources, categories))


def _log_breakdown(result: UserShiftResult) -> None:
    if not logger.isEnabledFor(logging.DEBUG):
        return
    logger.debug("%s's shifts on %s:", result.user.name, result.schedule)
    for index, shift in enumerate(result.shifts):
        logger.debug("  shift %d: %s (%s)", index, shift, shift.duration)
    for index, item in enumerate(result.breakdown):
        logger.debug("  attributed %d [%s]: %s (%s)", index, item.category.name, item.span, item.duration)


def process_schedule_user_shifts(
    schedule_user_shifts: ScheduleUserShifts,
    sources: Sequence[CategorySource],
    *,
    max_workers: int | None = None,
) -> dict[ScheduleName, list[UserShiftResult]]:
    """Attribute every user's shifts on every schedule.

    Parameters
    ----------
    schedule_user_shifts:
        Mapping of schedule name to the raw shifts of each user on that schedule.
    sources:
        The four category sources in priority order (see :func:`attribute_shift`).
    max_workers:
        When greater than one, (schedule, user) pairs are attributed concurrently on a
        thread pool. Attribution shares no state, so results are identical either way.

    Returns
    -------
    dict[str, list[UserShiftResult]]
        Results per schedule, users ordered by name.
    """
    deciders = build_deciders(sources)
    jobs: list[tuple[ScheduleName, User, tuple[Span, ...]]] = []
    for schedule, user_shifts in schedule_user_shifts.items():
        for user in sorted(user_shifts, key=lambda item: item.name):
            jobs.append((schedule, user, tuple(user_shifts[user])))

    def _attribute(job: tuple[ScheduleName, User, tuple[Span, ...]]) -> UserShiftResult:
        schedule, user, shifts = job
        return UserShiftResult(
            user=user,
            schedule=schedule,
            shifts=shifts,
            breakdown=_run_deciders(shifts, deciders),
        )

    if max_workers is not None and max_workers > 1 and len(jobs) > 1:
        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            results = list(executor.map(_attribute, jobs))
    else:
        results = [_attribute(job) for job in jobs]

    output: dict[ScheduleName, list[UserShiftResult]] = {name: [] for name in schedule_user_shifts}
    totals: dict[ScheduleName, timedelta] = {name: timedelta() for name in schedule_user_shifts}
    for result in results:
        _log_breakdown(result)
        if not result.is_balanced():
            logger.warning(
                "Shift and attribution durations differ for %s on %s: %s vs %s",
                result.user.name,
                result.schedule,
                total_duration(result.shifts),
                result.breakdown.total_dur(),
            )
        output[result.schedule].append(result)
        totals[result.schedule] += result.breakdown.total_dur()
    for schedule, total in totals.items():
        logger.debug("Total time from schedule %s: %s", schedule, total)
    return output


__all__ = [
    "ATTRIBUTION_ORDER",
    "CATCH_ALL",
    "Intersector",
    "attribute_shift",
    "build_deciders",
    "business_hours_intersector",
    "intersector_for",
    "process_schedule_user_shifts",
    "remove_matched_spans",
]
