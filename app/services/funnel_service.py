"""
FunnelService - moves a student through the sales funnel.

Stage advances are a monotone accumulation, not a validated state machine:
reaching threshold N marks every stage group up to N as done, and nothing
stops a caller from moving a student "backwards" (the flags already set stay
set, only ``current_stage`` changes).
"""
from datetime import date
from typing import Callable, Optional

from app.core.logging import get_logger
from app.models.funnel import Stage, STAGE_GROUPS, stage_threshold
from app.models.product import COURSE_PRODUCTS
from app.schemas.funnel import FunnelRecordData, StageDetails, StageUpdate
from app.services.record_store import RecordStore

logger = get_logger(__name__)

Clock = Callable[[], date]


class StudentNotFoundError(Exception):
    """Raised when a stage update targets an unknown student."""

    def __init__(self, student_id: str):
        self.student_id = student_id
        super().__init__(f"Student {student_id} not found")


def _supplied(value: Optional[str]) -> bool:
    return value is not None and value != ""


def advance_stage(
    record: FunnelRecordData,
    target_stage: str,
    details: Optional[StageDetails] = None,
    *,
    clock: Clock = date.today,
) -> FunnelRecordData:
    """Return ``record`` moved to ``target_stage``.

    For each stage group whose threshold (2 contact, 3 appointment, 4 visit,
    5 conversion) is at or below the target's numeric prefix the flag is set
    and the date becomes: the supplied date, else the date already on the
    record, else ``clock()``. Calling twice with the same inputs yields the
    same record.
    """
    details = details or StageDetails()
    threshold = stage_threshold(target_stage)
    today = clock().isoformat()

    update: dict = {"current_stage": target_stage}
    for field in ("name", "main_course", "consultant"):
        value = getattr(details, field)
        if value is not None:
            update[field] = value

    main_course = update.get("main_course", record.main_course)

    for group_threshold, group in STAGE_GROUPS:
        if threshold is None or threshold < group_threshold:
            break

        supplied_date = getattr(details, f"{group}_date")
        existing_date = getattr(record, f"{group}_date")
        update[f"{group}_status"] = True
        update[f"{group}_date"] = (
            supplied_date if _supplied(supplied_date) else existing_date or today
        )

        notes = getattr(details, f"{group}_notes")
        if notes is not None:
            update[f"{group}_notes"] = notes

    if threshold is not None and threshold >= 2 and details.contact_method is not None:
        update["contact_method"] = details.contact_method

    if threshold is not None and threshold >= 5:
        update["conversion_course"] = details.conversion_course or main_course
        update["conversion_amount"] = details.conversion_amount or 0

    return record.model_copy(update=update)


class FunnelService:
    """Stage updates against the record store."""

    def __init__(self, store: RecordStore, clock: Clock = date.today):
        self.store = store
        self.clock = clock

    async def get_record(self, student_id: str) -> Optional[FunnelRecordData]:
        return await self.store.get_funnel_record(student_id)

    async def update_stage(self, student_id: str, data: StageUpdate) -> FunnelRecordData:
        """
        Apply a stage update submitted from the progress form.

        The student's name always comes from the student list; a missing
        funnel record is started at the first-inquiry stage. When the form
        asks for it, reaching conversion also appends a sale of one unit of
        the catalogue product for the converted course; a course with no
        catalogue product gets no sale.
        """
        student = await self.store.get_student(student_id)
        if student is None:
            raise StudentNotFoundError(student_id)

        record = await self.store.get_funnel_record(student_id)
        if record is None:
            record = FunnelRecordData(
                student_id=student_id,
                name=student.name,
                consultant=student.consultant,
                current_stage=Stage.FIRST_INQUIRY.value,
            )

        previous_stage = record.current_stage
        updated = advance_stage(
            record, data.stage, data.to_details(name=student.name), clock=self.clock
        )
        await self.store.save_funnel_record(student_id, updated)

        logger.info(
            "funnel_stage_advanced",
            student_id=student_id,
            from_stage=previous_stage,
            to_stage=updated.current_stage,
        )

        if data.record_sale and updated.current_stage == Stage.CONVERTED.value:
            course = updated.conversion_course or updated.main_course
            product_id = await self._catalogue_product(course)
            if product_id:
                await self.store.append_sale(student_id, product_id, 1)
            else:
                logger.warning(
                    "conversion_sale_skipped",
                    student_id=student_id,
                    course=course,
                    reason="no catalogue product",
                )

        return updated

    async def _catalogue_product(self, course: str) -> Optional[str]:
        """Catalogue product id for a course name or short course code."""
        if not course:
            return None
        product_ids = {product.id for product in await self.store.list_products()}
        if course in product_ids:
            return course
        mapped = COURSE_PRODUCTS.get(course)
        return mapped if mapped in product_ids else None
