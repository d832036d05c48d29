"""
Graduation progress engine.

Every non-failed plan entry is routed to one credit track (general, primary
major, secondary major, minor, or free) and folded into per-track tallies.
The result carries earned / enrolled / planned sums and a capped completion
percentage per track, plus the prior-earned offsets from the requirement row.

The pure part (``route_track``, ``fold_entries``, ``compute_progress``) never
touches the database; ``calculate_progress`` and ``preview_course_addition``
load one user's rows through an injected session.
"""
import logging
import math
from dataclasses import dataclass
from enum import Enum
from functools import reduce
from typing import Iterable, List, NamedTuple, Optional, Union

from fastapi import HTTPException
from sqlalchemy.orm import Session, joinedload, selectinload

from app.models.course import Course
from app.models.graduation_requirement import GraduationRequirement
from app.models.plan import Plan, PlanSemester, PlannedCourse
from app.models.user import User
from app.schemas.graduation import (
    CourseAdditionPreviewOut,
    CourseInfoOut,
    CourseListsOut,
    CreditSnapshotOut,
    FloorProgressOut,
    GraduationProgressOut,
    MajorTrackProgressOut,
    RequiredMinOut,
    TrackProgressOut,
)

logger = logging.getLogger("app.graduation")

MAJOR_CATEGORIES = frozenset({"major_required", "major_compulsory", "major_elective"})
GENERAL_CATEGORIES = frozenset({"general_required", "general_elective"})
CORE_CATEGORY = "major_required"
DEFAULT_CATEGORY = "free_elective"

COUNTED_STATUSES = ("completed", "enrolled", "planned")


class Track(str, Enum):
    GENERAL = "general"
    PRIMARY_MAJOR = "primaryMajor"
    SECONDARY_MAJOR = "secondaryMajor"
    MINOR = "minor"
    FREE = "free"


def pct(earned, required) -> int:
    """Completion percentage, rounded half-up and capped at 100; 0 for a zero target."""
    if not required or required <= 0:
        return 0
    return min(100, int(math.floor(earned / required * 100 + 0.5)))


def route_track(category, major_type, course_dept, primary_dept, secondary_dept) -> Track:
    if category in GENERAL_CATEGORIES:
        return Track.GENERAL
    if category not in MAJOR_CATEGORIES:
        return Track.FREE

    if major_type not in ("double", "minor") or secondary_dept is None:
        return Track.PRIMARY_MAJOR
    if course_dept is None or course_dept == primary_dept:
        return Track.PRIMARY_MAJOR
    if course_dept == secondary_dept:
        return Track.SECONDARY_MAJOR if major_type == "double" else Track.MINOR
    # third department
    return Track.PRIMARY_MAJOR


# --- requirement variants ---

@dataclass(frozen=True)
class TrackTarget:
    credits: int
    prior: int = 0
    required_min: int = 0
    prior_required: int = 0


@dataclass(frozen=True)
class SingleMajor:
    pass


@dataclass(frozen=True)
class DoubleMajor:
    secondary: TrackTarget


@dataclass(frozen=True)
class MinorProgram:
    minor: Optional[TrackTarget]
    primary_major_min: Optional[int]


MajorProgram = Union[SingleMajor, DoubleMajor, MinorProgram]


def _n(value) -> int:
    return int(value or 0)


@dataclass(frozen=True)
class RequirementSettings:
    major_type: str
    total: TrackTarget
    general: TrackTarget
    primary_major: TrackTarget
    program: MajorProgram

    @classmethod
    def from_row(cls, req: GraduationRequirement) -> "RequirementSettings":
        major_type = req.major_type or "single"

        program: MajorProgram = SingleMajor()
        if major_type == "double" and req.secondary_major_credits is not None:
            program = DoubleMajor(
                secondary=TrackTarget(
                    credits=_n(req.secondary_major_credits),
                    prior=_n(req.earned_secondary_major_credits),
                    required_min=_n(req.secondary_major_required_min),
                    prior_required=_n(req.earned_secondary_major_required_credits),
                )
            )
        elif major_type == "minor" and (
            req.minor_credits is not None or req.minor_primary_major_min is not None
        ):
            minor = None
            if req.minor_credits is not None:
                minor = TrackTarget(
                    credits=_n(req.minor_credits),
                    prior=_n(req.earned_minor_credits),
                    required_min=_n(req.minor_required_min),
                    prior_required=_n(req.earned_minor_required_credits),
                )
            program = MinorProgram(minor=minor, primary_major_min=req.minor_primary_major_min)

        return cls(
            major_type=major_type,
            total=TrackTarget(credits=_n(req.total_credits), prior=_n(req.earned_total_credits)),
            general=TrackTarget(credits=_n(req.general_credits), prior=_n(req.earned_general_credits)),
            primary_major=TrackTarget(
                credits=_n(req.primary_major_credits),
                prior=_n(req.earned_primary_major_credits),
                required_min=_n(req.primary_major_required_min),
                prior_required=_n(req.earned_primary_major_required_credits),
            ),
            program=program,
        )

    def target_for(self, track: Track) -> Optional[TrackTarget]:
        if track == Track.GENERAL:
            return self.general
        if track == Track.PRIMARY_MAJOR:
            return self.primary_major
        if track == Track.SECONDARY_MAJOR and isinstance(self.program, DoubleMajor):
            return self.program.secondary
        if track == Track.MINOR and isinstance(self.program, MinorProgram):
            return self.program.minor
        return None


class StudentContext(NamedTuple):
    department_id: Optional[int] = None
    secondary_department_id: Optional[int] = None


class PlanEntry(NamedTuple):
    course_id: str
    code: str
    name: str
    credits: int
    # effective category, override already applied
    category: str
    department_id: Optional[int]
    status: str


# --- fold ---

class Tally(NamedTuple):
    earned: int = 0
    enrolled: int = 0
    planned: int = 0
    core_earned: int = 0
    core_enrolled: int = 0
    core_planned: int = 0

    def add(self, status: str, credits: int, core: bool = False) -> "Tally":
        core_credits = credits if core else 0
        if status == "completed":
            return self._replace(earned=self.earned + credits, core_earned=self.core_earned + core_credits)
        if status == "enrolled":
            return self._replace(enrolled=self.enrolled + credits, core_enrolled=self.core_enrolled + core_credits)
        if status == "planned":
            return self._replace(planned=self.planned + credits, core_planned=self.core_planned + core_credits)
        return self

    @property
    def projected(self) -> int:
        return self.earned + self.enrolled + self.planned

    @property
    def core_projected(self) -> int:
        return self.core_earned + self.core_enrolled + self.core_planned


class Accumulator(NamedTuple):
    total: Tally = Tally()
    general: Tally = Tally()
    primary_major: Tally = Tally()
    secondary_major: Tally = Tally()
    minor: Tally = Tally()
    completed: tuple = ()
    enrolled: tuple = ()
    planned: tuple = ()

    def tally_for(self, track: Track) -> Tally:
        field = _TRACK_FIELDS.get(track)
        return getattr(self, field) if field else self.total


_TRACK_FIELDS = {
    Track.GENERAL: "general",
    Track.PRIMARY_MAJOR: "primary_major",
    Track.SECONDARY_MAJOR: "secondary_major",
    Track.MINOR: "minor",
}


def route_entry(entry: PlanEntry, settings: RequirementSettings, student: StudentContext) -> Track:
    return route_track(
        entry.category,
        settings.major_type,
        entry.department_id,
        student.department_id,
        student.secondary_department_id,
    )


def contribute(acc: Accumulator, entry: PlanEntry, track: Track) -> Accumulator:
    if entry.status not in COUNTED_STATUSES:
        return acc

    changes = {"total": acc.total.add(entry.status, entry.credits)}

    field = _TRACK_FIELDS.get(track)
    if field:
        core = entry.category == CORE_CATEGORY
        changes[field] = getattr(acc, field).add(entry.status, entry.credits, core)

    info = CourseInfoOut(id=entry.course_id, code=entry.code, name=entry.name, credits=entry.credits)
    changes[entry.status] = getattr(acc, entry.status) + (info,)
    return acc._replace(**changes)


def fold_entries(
    entries: Iterable[PlanEntry],
    settings: RequirementSettings,
    student: StudentContext,
) -> Accumulator:
    return reduce(
        lambda acc, entry: contribute(acc, entry, route_entry(entry, settings, student)),
        entries,
        Accumulator(),
    )


def _track_out(target: TrackTarget, tally: Tally) -> TrackProgressOut:
    earned = tally.earned + target.prior
    return TrackProgressOut(
        required=target.credits,
        earned=earned,
        enrolled=tally.enrolled,
        planned=tally.planned,
        percentage=pct(earned, target.credits),
    )


def _major_out(target: TrackTarget, tally: Tally) -> MajorTrackProgressOut:
    track = _track_out(target, tally)
    core_earned = tally.core_earned + target.prior_required
    return MajorTrackProgressOut(
        **track.model_dump(),
        required_min=RequiredMinOut(
            required=target.required_min,
            earned=core_earned,
            planned=tally.core_planned,
            percentage=pct(core_earned, target.required_min),
        ),
    )


def build_progress(settings: RequirementSettings, acc: Accumulator) -> GraduationProgressOut:
    primary_major = _major_out(settings.primary_major, acc.primary_major)

    secondary_major = None
    minor = None
    minor_primary_major_min = None
    program = settings.program
    if isinstance(program, DoubleMajor):
        secondary_major = _major_out(program.secondary, acc.secondary_major)
    elif isinstance(program, MinorProgram):
        if program.minor is not None:
            minor = _major_out(program.minor, acc.minor)
        if program.primary_major_min is not None:
            minor_primary_major_min = FloorProgressOut(
                required=program.primary_major_min,
                earned=primary_major.earned,
                percentage=pct(primary_major.earned, program.primary_major_min),
            )

    return GraduationProgressOut(
        total=_track_out(settings.total, acc.total),
        primary_major=primary_major,
        general=_track_out(settings.general, acc.general),
        secondary_major=secondary_major,
        minor=minor,
        minor_primary_major_min=minor_primary_major_min,
        courses=CourseListsOut(
            completed=list(acc.completed),
            enrolled=list(acc.enrolled),
            planned=list(acc.planned),
        ),
    )


def compute_progress(
    settings: RequirementSettings,
    entries: Iterable[PlanEntry],
    student: StudentContext,
) -> GraduationProgressOut:
    return build_progress(settings, fold_entries(entries, settings, student))


# --- loading ---

def to_plan_entry(pc: PlannedCourse) -> Optional[PlanEntry]:
    course = pc.course
    if course is None or course.id is None:
        return None
    return PlanEntry(
        course_id=str(course.id),
        code=course.code or "N/A",
        name=course.name or "Unknown",
        credits=int(course.credits or 0),
        category=pc.category or course.category or DEFAULT_CATEGORY,
        department_id=course.department_id,
        status=pc.status,
    )


def load_plan_entries(db: Session, user_id: int) -> Optional[List[PlanEntry]]:
    """Plan entries in semester order, or None when the user has no plan."""
    plan = (
        db.query(Plan)
        .options(
            selectinload(Plan.semesters)
            .selectinload(PlanSemester.courses)
            .joinedload(PlannedCourse.course)
        )
        .filter(Plan.user_id == user_id)
        .first()
    )
    if plan is None:
        return None

    entries = []
    for semester in plan.sorted_semesters():
        for pc in semester.courses:
            entry = to_plan_entry(pc)
            if entry is None:
                logger.warning("[progress] skip dangling entry plan=%s course_id=%s", plan.id, pc.course_id)
                continue
            entries.append(entry)
    return entries


def _load_context(db: Session, user_id: int):
    requirement = (
        db.query(GraduationRequirement)
        .filter(GraduationRequirement.user_id == user_id)
        .first()
    )
    if requirement is None:
        return None

    user = db.get(User, user_id)
    student = StudentContext(
        department_id=user.department_id if user else None,
        secondary_department_id=user.secondary_department_id if user else None,
    )
    return RequirementSettings.from_row(requirement), student


def calculate_progress(db: Session, user_id: int) -> Optional[GraduationProgressOut]:
    loaded = _load_context(db, user_id)
    if loaded is None:
        return None
    settings, student = loaded

    entries = load_plan_entries(db, user_id)
    if entries is None:
        logger.info("[progress] user=%s has no plan, prior credits only", user_id)
        entries = []

    return compute_progress(settings, entries, student)


def _snapshot(target: TrackTarget, tally: Tally) -> CreditSnapshotOut:
    credits = target.prior + tally.projected
    return CreditSnapshotOut(credits=credits, percentage=pct(credits, target.credits))


def _core_snapshot(target: TrackTarget, tally: Tally) -> CreditSnapshotOut:
    credits = target.prior_required + tally.core_projected
    return CreditSnapshotOut(credits=credits, percentage=pct(credits, target.required_min))


MAJOR_TRACKS = (Track.PRIMARY_MAJOR, Track.SECONDARY_MAJOR, Track.MINOR)


def preview_course_addition(db: Session, user_id: int, course_id: int) -> Optional[CourseAdditionPreviewOut]:
    """
    Before/after projected credits if ``course_id`` were added to the plan as
    planned. Major tracks also get the major_required sub-minimum row.
    """
    loaded = _load_context(db, user_id)
    if loaded is None:
        return None
    settings, student = loaded

    course = db.get(Course, course_id)
    if not course:
        raise HTTPException(status_code=404, detail="Course not found")

    entries = load_plan_entries(db, user_id) or []
    before = fold_entries(entries, settings, student)

    candidate = PlanEntry(
        course_id=str(course.id),
        code=course.code,
        name=course.name,
        credits=int(course.credits or 0),
        category=course.category or DEFAULT_CATEGORY,
        department_id=course.department_id,
        status="planned",
    )
    track = route_entry(candidate, settings, student)

    # adding is idempotent, a course already in the plan changes nothing
    if any(e.course_id == candidate.course_id for e in entries):
        after = before
    else:
        after = contribute(before, candidate, track)

    total_before = _snapshot(settings.total, before.total)
    total_after = _snapshot(settings.total, after.total)

    preview = {}
    target = settings.target_for(track)
    if target is None:
        track_name = "total"
        track_before, track_after = total_before, total_after
    else:
        track_name = track.value
        track_before = _snapshot(target, before.tally_for(track))
        track_after = _snapshot(target, after.tally_for(track))
        if track in MAJOR_TRACKS:
            preview["required_min_before"] = _core_snapshot(target, before.tally_for(track))
            preview["required_min_after"] = _core_snapshot(target, after.tally_for(track))

    return CourseAdditionPreviewOut(
        course_id=candidate.course_id,
        credits=candidate.credits,
        category=candidate.category,
        track=track_name,
        before=track_before,
        after=track_after,
        total_before=total_before,
        total_after=total_after,
        **preview,
    )
