"""
Analytics Service - funnel and consultant statistics for the dashboard.

The aggregation functions are pure: they take already-fetched students and
funnel records and never touch the store. ``AnalyticsService`` does the
fetching and gives untouched students their first-inquiry record.

Date windows are anchored on the date a student most recently reached its
present stage: conversion date if converted, else visit, appointment, contact
date, and finally the inquiry date from the student list.
"""
import math
from collections import defaultdict
from typing import Optional, Sequence

from app.core.logging import get_logger
from app.models.funnel import Stage, STAGE_ORDER
from app.schemas.common import DateRange
from app.schemas.funnel import (
    ConsultantPerformance,
    ConversionCourseStat,
    DimensionStat,
    FunnelAnalytics,
    FunnelRecordData,
    StageStat,
)
from app.schemas.student import StudentRecord
from app.services.classification import COURSES, METHODS, SOURCES, classify_method, classify_source
from app.services.date_range import in_range
from app.services.record_store import RecordStore

logger = get_logger(__name__)


def percent(part: int, whole: int) -> int:
    """``part / whole`` as a whole percentage, rounded half up; 0 for an empty whole."""
    if whole <= 0:
        return 0
    return math.floor(part * 100 / whole + 0.5)


def reached_stage_date(record: FunnelRecordData) -> Optional[str]:
    """Date of the furthest stage whose flag is set; ``None`` if no flag is set.

    A set flag with an empty date yields ``""`` (which no window admits).
    """
    if record.conversion_status:
        return record.conversion_date
    if record.visit_status:
        return record.visit_date
    if record.appointment_status:
        return record.appointment_date
    if record.contact_status:
        return record.contact_date
    return None


def with_intake_records(
    students: Sequence[StudentRecord],
    funnel_records: Sequence[FunnelRecordData],
) -> list[FunnelRecordData]:
    """Stored records plus a first-inquiry record for every student without one.

    Every student sits in the funnel from first inquiry onwards, whether or
    not a stage update has been saved for them yet.
    """
    known = {record.student_id for record in funnel_records}
    records = list(funnel_records)
    for student in students:
        if not student.student_id or student.student_id in known:
            continue
        known.add(student.student_id)
        records.append(FunnelRecordData(
            student_id=student.student_id,
            name=student.name,
            consultant=student.consultant,
        ))
    return records


class _StudentInfo:
    __slots__ = ("inquiry_date", "source", "method")

    def __init__(self, inquiry_date: str, source: Optional[str], method: Optional[str]):
        self.inquiry_date = inquiry_date
        self.source = source
        self.method = method


def _dimension_stats(names: list[str], inquiries: dict, conversions: dict) -> list[DimensionStat]:
    return [
        DimensionStat(
            name=name,
            inquiry_count=inquiries[name],
            conversion_count=conversions[name],
            conversion_rate=percent(conversions[name], inquiries[name]),
        )
        for name in names
        if inquiries[name] > 0
    ]


def compute_funnel_analytics(
    students: Sequence[StudentRecord],
    funnel_records: Sequence[FunnelRecordData],
    date_range: Optional[DateRange] = None,
) -> FunnelAnalytics:
    """Stage breakdown plus source / method / course conversion statistics."""
    windowed = date_range is not None and not date_range.is_empty

    # Latest known info per student; a later duplicate id replaces the earlier one
    student_info: dict[str, _StudentInfo] = {}
    source_inq: dict[str, int] = defaultdict(int)
    source_conv: dict[str, int] = defaultdict(int)
    method_inq: dict[str, int] = defaultdict(int)
    method_conv: dict[str, int] = defaultdict(int)

    for student in students:
        source = classify_source(student)
        method = classify_method(student)
        if student.student_id:
            student_info[student.student_id] = _StudentInfo(student.inquiry_date, source, method)

        if in_range(student.inquiry_date, date_range):
            if source:
                source_inq[source] += 1
            if method:
                method_inq[method] += 1

    def included(record: FunnelRecordData) -> bool:
        if not windowed:
            return True
        anchor = reached_stage_date(record)
        if anchor is None:
            info = student_info.get(record.student_id)
            anchor = info.inquiry_date if info else None
        if not anchor:
            return False
        return in_range(anchor, date_range)

    filtered = [record for record in funnel_records if included(record)]

    stage_counts: dict[str, int] = {stage.value: 0 for stage in STAGE_ORDER}
    course_inq: dict[str, int] = defaultdict(int)
    course_conv: dict[str, int] = defaultdict(int)
    conversion_courses: dict[str, int] = {}
    total_amount = 0.0

    for record in filtered:
        stage = record.current_stage or Stage.FIRST_INQUIRY.value
        if stage in stage_counts:
            stage_counts[stage] += 1

        if record.main_course in COURSES:
            course_inq[record.main_course] += 1
            if record.conversion_status:
                course_conv[record.main_course] += 1

        if not record.conversion_status:
            continue

        if record.conversion_course:
            conversion_courses[record.conversion_course] = (
                conversion_courses.get(record.conversion_course, 0) + 1
            )
        total_amount += record.conversion_amount or 0

        info = student_info.get(record.student_id)
        if info is not None:
            if info.source:
                source_conv[info.source] += 1
            if info.method:
                method_conv[info.method] += 1

    total = len(filtered)
    stages = [
        StageStat(
            stage=stage,
            count=count,
            percentage=percent(count, total),
            conversion_rate=percent(count, total),
        )
        for stage, count in stage_counts.items()
    ]
    by_conversion_course = sorted(
        (ConversionCourseStat(course=course, count=count) for course, count in conversion_courses.items()),
        key=lambda item: item.count,
        reverse=True,
    )

    return FunnelAnalytics(
        total_students=total,
        total_conversion_amount=total_amount,
        stages=stages,
        by_course=_dimension_stats(COURSES, course_inq, course_conv),
        by_source=_dimension_stats(SOURCES, source_inq, source_conv),
        by_method=_dimension_stats(METHODS, method_inq, method_conv),
        by_conversion_course=by_conversion_course,
    )


def _in_consultant_window(record: FunnelRecordData, date_range: DateRange) -> bool:
    anchor = reached_stage_date(record)
    if anchor is None:
        return True
    return in_range(anchor, date_range)


def compute_consultant_performance(
    funnel_records: Sequence[FunnelRecordData],
    date_range: Optional[DateRange] = None,
) -> list[ConsultantPerformance]:
    """
    Per-consultant funnel, best overall conversion first.

    Records without a consultant are left out. Within a window, a record with
    no stage reached yet has no stage date to test and stays in.
    """
    windowed = date_range is not None and not date_range.is_empty

    by_consultant: dict[str, list[FunnelRecordData]] = {}
    for record in funnel_records:
        if record.consultant:
            by_consultant.setdefault(record.consultant, []).append(record)

    performance = []
    for name, records in by_consultant.items():
        if windowed:
            records = [r for r in records if _in_consultant_window(r, date_range)]

        total = len(records)
        if total == 0:
            continue

        s2 = sum(1 for r in records if r.contact_status)
        s3 = sum(1 for r in records if r.appointment_status)
        s4 = sum(1 for r in records if r.visit_status)
        s5 = sum(1 for r in records if r.conversion_status)

        performance.append(ConsultantPerformance(
            name=name,
            total=total,
            stage2_count=s2,
            stage3_count=s3,
            stage4_count=s4,
            stage5_count=s5,
            contact_rate=percent(s2, total),
            appointment_rate=percent(s3, s2),
            visit_rate=percent(s4, s3),
            conversion_rate=percent(s5, s4),
            overall_rate=percent(s5, total),
        ))

    return sorted(performance, key=lambda item: item.overall_rate, reverse=True)


class AnalyticsService:
    """Fetches records from the store and runs the aggregations."""

    def __init__(self, store: RecordStore):
        self.store = store

    async def get_funnel_analytics(self, date_range: Optional[DateRange] = None) -> FunnelAnalytics:
        students = await self.store.list_students()
        records = with_intake_records(students, await self.store.list_funnel_records())
        result = compute_funnel_analytics(students, records, date_range)
        logger.debug(
            "funnel_analytics_computed",
            students=len(students),
            records=len(records),
            included=result.total_students,
        )
        return result

    async def get_consultant_performance(
        self, date_range: Optional[DateRange] = None
    ) -> list[ConsultantPerformance]:
        students = await self.store.list_students()
        records = with_intake_records(students, await self.store.list_funnel_records())
        return compute_consultant_performance(records, date_range)
