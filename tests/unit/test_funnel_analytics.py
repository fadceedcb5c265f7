"""
Unit tests for funnel analytics aggregation.
"""
import pytest

from app.schemas.common import DateRange
from app.schemas.funnel import FunnelRecordData
from app.schemas.student import StudentRecord
from app.services.analytics_service import (
    compute_funnel_analytics,
    percent,
    reached_stage_date,
    with_intake_records,
)


def stage_count(result, label: str) -> int:
    return next(s.count for s in result.stages if s.stage == label)


def converted(student_id: str, **kwargs) -> FunnelRecordData:
    defaults = dict(
        current_stage="5. 成交",
        contact_status=True,
        appointment_status=True,
        visit_status=True,
        conversion_status=True,
        conversion_date="2024-03-10",
    )
    return FunnelRecordData(student_id=student_id, **{**defaults, **kwargs})


class TestPercent:
    @pytest.mark.parametrize("part, whole, expected", [
        (1, 1, 100),
        (0, 5, 0),
        (1, 3, 33),
        (2, 3, 67),
        (1, 8, 13),   # 12.5 rounds up
        (3, 8, 38),   # 37.5 rounds up
        (5, 0, 0),
    ])
    def test_half_up_rounding(self, part, whole, expected):
        assert percent(part, whole) == expected


class TestFunnelAnalytics:
    def test_single_converted_student(self):
        students = [StudentRecord(student_id="S1", source="FB", inquiry_date="2024-03-01")]
        records = [converted("S1", main_course="美甲", conversion_course="美甲", conversion_amount=5000)]

        result = compute_funnel_analytics(students, records)

        assert result.total_students == 1
        assert result.total_conversion_amount == 5000
        assert stage_count(result, "5. 成交") == 1
        conversion = next(s for s in result.stages if s.stage == "5. 成交")
        assert conversion.percentage == 100
        assert conversion.conversion_rate == 100

        [facebook] = result.by_source
        assert (facebook.name, facebook.inquiry_count, facebook.conversion_count, facebook.conversion_rate) == (
            "Facebook", 1, 1, 100
        )
        [course] = result.by_course
        assert (course.name, course.conversion_rate) == ("美甲", 100)
        assert [(c.course, c.count) for c in result.by_conversion_course] == [("美甲", 1)]

    def test_empty_input(self):
        result = compute_funnel_analytics([], [])
        assert result.total_students == 0
        assert result.total_conversion_amount == 0
        assert len(result.stages) == 8
        assert all(s.count == 0 and s.percentage == 0 for s in result.stages)
        assert result.by_source == []
        assert result.by_method == []
        assert result.by_course == []
        assert result.by_conversion_course == []

    def test_stages_listed_in_funnel_order(self):
        result = compute_funnel_analytics([], [])
        assert [s.stage for s in result.stages][0] == "1. 首次洽詢"
        assert [s.stage for s in result.stages][-1] == "5. 成交"

    def test_empty_stage_counts_as_first_inquiry(self):
        records = [FunnelRecordData(student_id="S1", current_stage="")]
        result = compute_funnel_analytics([], records)
        assert stage_count(result, "1. 首次洽詢") == 1

    def test_unknown_stage_is_dropped_from_breakdown(self):
        records = [
            FunnelRecordData(student_id="S1", current_stage="暫停"),
            FunnelRecordData(student_id="S2", current_stage="2.1 聯繫成功", contact_status=True),
        ]
        result = compute_funnel_analytics([], records)
        assert result.total_students == 2
        assert sum(s.count for s in result.stages) == 1
        assert stage_count(result, "2.1 聯繫成功") == 1
        assert next(s for s in result.stages if s.stage == "2.1 聯繫成功").percentage == 50

    def test_first_matching_source_wins(self):
        students = [
            StudentRecord(
                student_id="S1",
                source_flags={"Google搜尋": "TRUE", "Facebook": "TRUE"},
                inquiry_date="2024-03-01",
            )
        ]
        result = compute_funnel_analytics(students, [])
        assert [s.name for s in result.by_source] == ["Google搜尋"]

    def test_unclassified_student_not_counted_in_dimensions(self):
        students = [StudentRecord(student_id="S1", source="介紹", method="信件")]
        result = compute_funnel_analytics(students, [])
        assert result.by_source == []
        assert result.by_method == []

    def test_method_conversion_counts_follow_student(self):
        students = [
            StudentRecord(student_id="S1", method_flags={"電話": "1"}),
            StudentRecord(student_id="S2", method="電話"),
        ]
        records = [converted("S1"), FunnelRecordData(student_id="S2")]
        result = compute_funnel_analytics(students, records)
        [phone] = result.by_method
        assert (phone.inquiry_count, phone.conversion_count, phone.conversion_rate) == (2, 1, 50)

    def test_course_outside_list_is_ignored(self):
        records = [converted("S1", main_course="瑜珈")]
        result = compute_funnel_analytics([], records)
        assert result.by_course == []

    def test_conversion_courses_sorted_by_count(self):
        records = [
            converted("S1", conversion_course="美睫"),
            converted("S2", conversion_course="紋繡"),
            converted("S3", conversion_course="紋繡"),
            converted("S4", conversion_course=""),
        ]
        result = compute_funnel_analytics([], records)
        assert [(c.course, c.count) for c in result.by_conversion_course] == [("紋繡", 2), ("美睫", 1)]

    def test_unconverted_amount_not_summed(self):
        records = [
            converted("S1", conversion_amount=3000),
            FunnelRecordData(student_id="S2", conversion_amount=9999),
        ]
        result = compute_funnel_analytics([], records)
        assert result.total_conversion_amount == 3000

    def test_stage_counts_never_exceed_total(self):
        records = [
            converted("S1"),
            FunnelRecordData(student_id="S2", current_stage="3.2 邀約失敗"),
            FunnelRecordData(student_id="S3", current_stage="???"),
        ]
        result = compute_funnel_analytics([], records)
        assert sum(s.count for s in result.stages) <= result.total_students
        for stat in result.stages:
            assert 0 <= stat.percentage <= 100


class TestFunnelWindow:
    WINDOW = DateRange(date_from="2024-03-01", date_to="2024-03-31")

    def test_reached_stage_date_prefers_furthest_stage(self):
        record = FunnelRecordData(
            student_id="S1",
            contact_status=True, contact_date="2024-01-01",
            visit_status=True, visit_date="2024-02-01",
        )
        assert reached_stage_date(record) == "2024-02-01"
        assert reached_stage_date(FunnelRecordData(student_id="S2")) is None

    def test_record_anchored_on_conversion_date(self):
        records = [
            converted("S1", conversion_date="2024-03-05"),
            converted("S2", conversion_date="2024-04-05"),
        ]
        result = compute_funnel_analytics([], records, self.WINDOW)
        assert result.total_students == 1

    def test_falls_back_to_inquiry_date(self):
        students = [
            StudentRecord(student_id="S1", inquiry_date="2024/3/15"),
            StudentRecord(student_id="S2", inquiry_date="2024/2/15"),
        ]
        records = [FunnelRecordData(student_id="S1"), FunnelRecordData(student_id="S2")]
        result = compute_funnel_analytics(students, records, self.WINDOW)
        assert result.total_students == 1
        assert stage_count(result, "1. 首次洽詢") == 1

    def test_no_resolvable_date_is_excluded(self):
        records = [FunnelRecordData(student_id="ghost")]
        result = compute_funnel_analytics([], records, self.WINDOW)
        assert result.total_students == 0

    def test_set_flag_without_date_is_excluded(self):
        students = [StudentRecord(student_id="S1", inquiry_date="2024-03-02")]
        records = [FunnelRecordData(student_id="S1", contact_status=True, contact_date="")]
        result = compute_funnel_analytics(students, records, self.WINDOW)
        assert result.total_students == 0

    def test_source_counts_windowed_on_inquiry_date(self):
        students = [
            StudentRecord(student_id="S1", source="FB", inquiry_date="2024-03-02"),
            StudentRecord(student_id="S2", source="FB", inquiry_date="2023-12-30"),
        ]
        result = compute_funnel_analytics(students, [], self.WINDOW)
        [facebook] = result.by_source
        assert facebook.inquiry_count == 1

    def test_empty_window_behaves_like_no_window(self):
        records = [FunnelRecordData(student_id="ghost")]
        result = compute_funnel_analytics([], records, DateRange())
        assert result.total_students == 1


class TestIntakeRecords:
    def test_students_without_record_start_at_first_inquiry(self):
        students = [
            StudentRecord(student_id="S1", name="張三", consultant="Amy"),
            StudentRecord(student_id="S2", name="李四", consultant="Ben"),
        ]
        stored = [converted("S1", consultant="Amy")]

        records = with_intake_records(students, stored)

        assert [r.student_id for r in records] == ["S1", "S2"]
        assert records[0] is stored[0]
        assert records[1] == FunnelRecordData(student_id="S2", name="李四", consultant="Ben")
        assert records[1].current_stage == "1. 首次洽詢"

    def test_untouched_students_fill_the_first_bucket(self):
        students = [StudentRecord(student_id=f"S{i}") for i in range(4)]
        records = with_intake_records(students, [converted("S0")])

        result = compute_funnel_analytics(students, records)

        assert result.total_students == 4
        assert stage_count(result, "1. 首次洽詢") == 3
        assert next(s for s in result.stages if s.stage == "5. 成交").percentage == 25

    def test_duplicate_and_blank_ids_added_once(self):
        students = [
            StudentRecord(student_id="S1"),
            StudentRecord(student_id="S1"),
            StudentRecord(student_id=""),
        ]
        assert [r.student_id for r in with_intake_records(students, [])] == ["S1"]
