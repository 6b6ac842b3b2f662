"""
Program Registry

The four admission programs share a table family
(``<prefix>_application``, ``_slot``, ``_slot_student``, ``_registered``) but
not an identical schema. Each ``ProgramConfig`` records the differences so the
report templates stay data-driven:

- how slot attendance is stored (``AttendanceSource``)
- which column holds the applicant's area of interest
- how many recent applications feed the notifications feed
"""

import enum
from abc import ABC, abstractmethod
from dataclasses import dataclass

from .introspection import ensure_identifier


class Program(str, enum.Enum):
    """Admission programs."""

    PGP = "pgp"
    PHD = "phd"
    EPHD = "ephd"
    EMBA = "emba"


class UnknownProgramError(Exception):
    """Raised when a program slug is not one of the registered programs."""

    def __init__(self, slug: str):
        self.slug = slug
        self.message = (
            f"Unknown program '{slug}'. Expected one of: "
            f"{', '.join(p.value for p in Program)}"
        )
        self.error_code = "UNKNOWN_PROGRAM"
        self.status_code = 400
        super().__init__(self.message)


# ============================================
# Attendance Sources
# ============================================


class AttendanceSource(ABC):
    """
    SQL for the attendance breakdown of a program's slot students.

    Variants declare the SQL conditions for ``present``, ``absent`` and
    ``pending`` and how "today" is scoped. Every variant yields the same column
    names: ``today_total_students``; ``present_students``/``absent_students``/
    ``pending_students`` for today; ``total_present``/``total_absent``/
    ``total_pending`` over all time.

    Head counts are separate statements that never reference the attendance
    column.
    """

    present: str
    absent: str
    pending: str

    def _count(self, condition: str, alias: str, table_alias: str = "") -> str:
        prefix = f"{table_alias}." if table_alias else ""
        return f"COUNT(CASE WHEN {prefix}{condition} THEN 1 END) AS {alias}"

    @abstractmethod
    def today_students_sql(self, prefix: str, slot_date_column: str) -> str: ...

    @abstractmethod
    def today_breakdown_sql(self, prefix: str, slot_date_column: str) -> str: ...

    def total_students_sql(self, prefix: str) -> str:
        return f"SELECT COUNT(*) AS total_students FROM {prefix}_slot_student"

    def totals_breakdown_sql(self, prefix: str) -> str:
        return (
            "SELECT "
            f"{self._count(self.present, 'total_present')}, "
            f"{self._count(self.absent, 'total_absent')}, "
            f"{self._count(self.pending, 'total_pending')} "
            f"FROM {prefix}_slot_student"
        )


class StatusAttendance(AttendanceSource):
    """Enum ``status`` column; "today" means the student was added today."""

    present = "status = 'present'"
    absent = "status = 'absent'"
    pending = "status = 'pending'"

    def today_students_sql(self, prefix: str, slot_date_column: str) -> str:
        return (
            "SELECT COUNT(*) AS today_total_students "
            f"FROM {prefix}_slot_student WHERE DATE(added_at) = CURRENT_DATE"
        )

    def today_breakdown_sql(self, prefix: str, slot_date_column: str) -> str:
        return (
            "SELECT "
            f"{self._count(self.present, 'present_students')}, "
            f"{self._count(self.absent, 'absent_students')}, "
            f"{self._count(self.pending, 'pending_students')} "
            f"FROM {prefix}_slot_student WHERE DATE(added_at) = CURRENT_DATE"
        )


class FlagAttendance(AttendanceSource):
    """Nullable boolean ``attendance`` column; "today" means the slot is today."""

    present = "attendance = 1"
    absent = "attendance = 0"
    pending = "attendance IS NULL"

    def _today_join(self, prefix: str, slot_date_column: str) -> str:
        ensure_identifier(slot_date_column)
        return (
            f"FROM {prefix}_slot_student ss "
            f"JOIN {prefix}_slot s ON ss.slot_id = s.id "
            f"WHERE DATE(s.{slot_date_column}) = CURRENT_DATE"
        )

    def today_students_sql(self, prefix: str, slot_date_column: str) -> str:
        return (
            "SELECT COUNT(*) AS today_total_students "
            f"{self._today_join(prefix, slot_date_column)}"
        )

    def today_breakdown_sql(self, prefix: str, slot_date_column: str) -> str:
        return (
            "SELECT "
            f"{self._count(self.present, 'present_students', 'ss')}, "
            f"{self._count(self.absent, 'absent_students', 'ss')}, "
            f"{self._count(self.pending, 'pending_students', 'ss')} "
            f"{self._today_join(prefix, slot_date_column)}"
        )


# ============================================
# Program Configuration
# ============================================


@dataclass(frozen=True)
class ProgramConfig:
    program: Program
    label: str
    prefix: str
    attendance: AttendanceSource
    area_column: str | None = None
    recent_activity_limit: int = 0

    @property
    def application_table(self) -> str:
        return f"{self.prefix}_application"

    @property
    def slot_table(self) -> str:
        return f"{self.prefix}_slot"

    @property
    def slot_student_table(self) -> str:
        return f"{self.prefix}_slot_student"

    @property
    def registered_table(self) -> str:
        return f"{self.prefix}_registered"


PROGRAMS: dict[Program, ProgramConfig] = {
    Program.PGP: ProgramConfig(
        program=Program.PGP,
        label="PGP",
        prefix="iim_pgpmci",
        attendance=StatusAttendance(),
        recent_activity_limit=5,
    ),
    Program.PHD: ProgramConfig(
        program=Program.PHD,
        label="PhD",
        prefix="iim_phd",
        attendance=FlagAttendance(),
        area_column="research_area",
        recent_activity_limit=3,
    ),
    Program.EPHD: ProgramConfig(
        program=Program.EPHD,
        label="EPhD",
        prefix="iim_ephd",
        attendance=FlagAttendance(),
        area_column="research_area",
    ),
    Program.EMBA: ProgramConfig(
        program=Program.EMBA,
        label="EMBA",
        prefix="iim_emba",
        attendance=StatusAttendance(),
        area_column="specialization_area",
    ),
}


def get_program_config(program: str | Program) -> ProgramConfig:
    """
    Look up a program by slug (case-insensitive).

    Raises:
        UnknownProgramError: If the slug is not a registered program
    """
    if isinstance(program, Program):
        return PROGRAMS[program]
    try:
        return PROGRAMS[Program(program.strip().lower())]
    except ValueError as e:
        raise UnknownProgramError(program) from e
