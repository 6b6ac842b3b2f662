"""
Report Templates

A program report is described as an ordered battery of ``ReportQuery``
entries. Each entry is one independent aggregate statement plus a mapping of
its result columns onto dotted paths of the nested report, e.g.
``("commitment_fee_paid", "phase3.commitment_fee_paid")``. The default report
(every path at 0, every list at ``[]``) is derived from the same battery, so
the report shape and the queries filling it can never drift apart.
"""

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any

from .introspection import ensure_identifier
from .programs import Program, ProgramConfig
from .safe_query import Row, normalize_number, normalize_row

Report = dict[str, Any]


def _set_path(report: Report, path: str, value: Any) -> None:
    *parents, leaf = path.split(".")
    node = report
    for key in parents:
        node = node.setdefault(key, {})
    node[leaf] = value


@dataclass(frozen=True)
class ReportQuery:
    """
    One aggregate statement of a report battery.

    Attributes:
        label: Context used when logging a failure ("PhD commitment fee query")
        sql: Statement text with named parameters
        fields: (result column, report path) pairs read from the first row
        list_path: Report path receiving every row, for grouped statements
        params: Bound parameter values
    """

    label: str
    sql: str
    fields: tuple[tuple[str, str], ...] = ()
    list_path: str | None = None
    params: dict[str, Any] = field(default_factory=dict)

    def apply(self, report: Report, rows: list[Row]) -> None:
        """Write a successful result into ``report``."""
        if self.list_path is not None:
            _set_path(report, self.list_path, [normalize_row(row) for row in rows])
            return

        first = rows[0] if rows else {}
        for column, path in self.fields:
            _set_path(report, path, normalize_number(first.get(column)))


def default_report(queries: Sequence[ReportQuery]) -> Report:
    """Build the report with every path at its default (0, or [] for lists)."""
    report: Report = {}
    for query in queries:
        for _, path in query.fields:
            _set_path(report, path, 0)
        if query.list_path is not None:
            _set_path(report, query.list_path, [])
    return report


# ============================================
# Batteries
# ============================================


def _standard_queries(config: ProgramConfig, slot_date_column: str) -> list[ReportQuery]:
    """PhD, EPhD and EMBA: phase3 / phase2 / phase1."""
    label = config.label
    app_table = config.application_table
    attendance = config.attendance
    area = ensure_identifier(config.area_column or "research_area")

    return [
        ReportQuery(
            label=f"{label} commitment fee query",
            sql=f"SELECT COUNT(*) AS commitment_fee_paid FROM {app_table} WHERE commitment_payment = 1",
            fields=(("commitment_fee_paid", "phase3.commitment_fee_paid"),),
        ),
        ReportQuery(
            label=f"{label} slots query",
            sql=(
                f"SELECT COUNT(*) AS today_total_slots FROM {config.slot_table} "
                f"WHERE DATE({slot_date_column}) = CURRENT_DATE"
            ),
            fields=(("today_total_slots", "phase2.today_total_slots"),),
        ),
        ReportQuery(
            label=f"{label} students today query",
            sql=attendance.today_students_sql(config.prefix, slot_date_column),
            fields=(("today_total_students", "phase2.today_total_students"),),
        ),
        ReportQuery(
            label=f"{label} attendance today query",
            sql=attendance.today_breakdown_sql(config.prefix, slot_date_column),
            fields=(
                ("present_students", "phase2.present_students"),
                ("absent_students", "phase2.absent_students"),
                ("pending_students", "phase2.pending_students"),
            ),
        ),
        ReportQuery(
            label=f"{label} total slots query",
            sql=f"SELECT COUNT(*) AS total_slots FROM {config.slot_table}",
            fields=(("total_slots", "phase2.total_slots"),),
        ),
        ReportQuery(
            label=f"{label} total students query",
            sql=attendance.total_students_sql(config.prefix),
            fields=(("total_students", "phase2.total_students"),),
        ),
        ReportQuery(
            label=f"{label} attendance totals query",
            sql=attendance.totals_breakdown_sql(config.prefix),
            fields=(
                ("total_present", "phase2.total_present"),
                ("total_absent", "phase2.total_absent"),
                ("total_pending", "phase2.total_pending"),
            ),
        ),
        ReportQuery(
            label=f"{label} registrations query",
            sql=f"SELECT COUNT(*) AS total_registrations FROM {config.registered_table}",
            fields=(("total_registrations", "phase1.total_registrations"),),
        ),
        ReportQuery(
            label=f"{label} shortlisted query",
            sql=(
                f"SELECT COUNT(*) AS shortlisted_students FROM {config.registered_table} "
                "WHERE shortlist_status = 'shortlisted'"
            ),
            fields=(("shortlisted_students", "phase1.shortlisted_students"),),
        ),
        ReportQuery(
            label=f"{label} applications query",
            sql=(
                "SELECT COUNT(*) AS total_applications, "
                "SUM(CASE WHEN final_submit = 1 THEN 1 ELSE 0 END) AS submitted_applications "
                f"FROM {app_table}"
            ),
            fields=(
                ("total_applications", "phase1.total_applications"),
                ("submitted_applications", "phase1.submitted_applications"),
            ),
        ),
        ReportQuery(
            label=f"{label} area-wise applications query",
            sql=(
                f"SELECT {area}, COUNT(*) AS application_count FROM {app_table} "
                f"WHERE final_submit = 1 GROUP BY {area}"
            ),
            list_path="phase1.area_wise_applications",
        ),
    ]


def _pgp_queries(config: ProgramConfig, slot_date_column: str) -> list[ReportQuery]:
    """PGP: acceptance, fees, withdrawals, consent and verification on top of the basics."""
    app_table = config.application_table
    attendance = config.attendance

    return [
        ReportQuery(
            label="PGP accept/reject query",
            sql=(
                "SELECT "
                "COUNT(CASE WHEN commitment_payment = 1 THEN 1 END) AS total_accepted, "
                "COUNT(CASE WHEN cancellation_request = 1 THEN 1 END) AS total_rejected "
                f"FROM {app_table}"
            ),
            fields=(
                ("total_accepted", "phase3.total_accepted"),
                ("total_rejected", "phase3.total_rejected"),
            ),
        ),
        ReportQuery(
            label="PGP fees query",
            sql=(
                "SELECT "
                "SUM(CASE WHEN transaction_payment_type = 'commitment' THEN 1 ELSE 0 END) AS commitment_fee_paid, "
                "SUM(CASE WHEN transaction_payment_type = 'term' THEN 1 ELSE 0 END) AS term_fee_paid "
                "FROM iim_payment"
            ),
            fields=(
                ("commitment_fee_paid", "phase3.commitment_fee_paid"),
                ("term_fee_paid", "phase3.term_fee_paid"),
            ),
        ),
        ReportQuery(
            label="PGP acceptance form query",
            sql=(
                "SELECT SUM(CASE WHEN acceptance_form_submitted = 1 THEN 1 ELSE 0 END) "
                f"AS acceptance_form_submitted FROM {app_table}"
            ),
            fields=(("acceptance_form_submitted", "phase3.acceptance_form_submitted"),),
        ),
        ReportQuery(
            label="PGP withdrawals query",
            sql=f"SELECT COUNT(*) AS total_withdrawals FROM {config.prefix}_withdraw",
            fields=(("total_withdrawals", "withdrawals.total_withdrawals"),),
        ),
        ReportQuery(
            label="PGP slots query",
            sql=(
                f"SELECT COUNT(*) AS today_total_slots FROM {config.slot_table} "
                f"WHERE DATE({slot_date_column}) = CURRENT_DATE"
            ),
            fields=(("today_total_slots", "phase2b.today_total_slots"),),
        ),
        ReportQuery(
            label="PGP students today query",
            sql=attendance.today_students_sql(config.prefix, slot_date_column),
            fields=(("today_total_students", "phase2b.today_total_students"),),
        ),
        ReportQuery(
            label="PGP attendance today query",
            sql=attendance.today_breakdown_sql(config.prefix, slot_date_column),
            fields=(
                ("present_students", "phase2b.present_students"),
                ("absent_students", "phase2b.absent_students"),
            ),
        ),
        ReportQuery(
            label="PGP consent query",
            sql=(
                "SELECT COUNT(*) AS total_consent_requests, "
                "SUM(check1 + check2 + check3 + check4) AS total_consent_checks "
                "FROM iim_consent_form"
            ),
            fields=(
                ("total_consent_requests", "phase2a.total_consent_requests"),
                ("total_consent_checks", "phase2a.total_consent_checks"),
            ),
        ),
        ReportQuery(
            label="PGP verification query",
            sql=(
                "SELECT "
                "SUM(CASE WHEN reason = 'reopen' THEN 1 ELSE 0 END) AS reopen, "
                "SUM(CASE WHEN reason = 'resubmitted' THEN 1 ELSE 0 END) AS resubmitted, "
                "SUM(CASE WHEN reason = 'auto_submitted' THEN 1 ELSE 0 END) AS auto_submitted "
                f"FROM {config.prefix}_verification"
            ),
            fields=(
                ("reopen", "verificationDetails.reopen"),
                ("resubmitted", "verificationDetails.resubmitted"),
                ("auto_submitted", "verificationDetails.auto_submitted"),
            ),
        ),
        ReportQuery(
            label="PGP applications query",
            sql=(
                "SELECT COUNT(*) AS total_applications, "
                "SUM(CASE WHEN final_submit = 1 THEN 1 ELSE 0 END) AS form_submitted, "
                "SUM(CASE WHEN reopen = 1 THEN 1 ELSE 0 END) AS reopened, "
                "SUM(CASE WHEN resubmitted = 1 THEN 1 ELSE 0 END) AS resubmitted, "
                "SUM(CASE WHEN resubmitted = 0 THEN 1 ELSE 0 END) AS not_resubmitted "
                f"FROM {app_table}"
            ),
            fields=(
                ("form_submitted", "phase1.form_submitted"),
                ("total_applications", "phase1.total_applications"),
                ("reopened", "phase1.reopened"),
                ("resubmitted", "phase1.resubmitted"),
                ("not_resubmitted", "phase1.not_resubmitted"),
            ),
        ),
        ReportQuery(
            label="PGP registrations query",
            sql=f"SELECT COUNT(*) AS registered_students FROM {config.registered_table}",
            fields=(("registered_students", "phase1.registered_students"),),
        ),
        ReportQuery(
            label="PGP shortlisted query",
            sql=(
                f"SELECT COUNT(*) AS shortlisted_students FROM {config.registered_table} "
                "WHERE shortlist_status = 'shortlisted'"
            ),
            fields=(("shortlisted_students", "phase1.shortlisted_students"),),
        ),
    ]


def report_queries(config: ProgramConfig, slot_date_column: str = "slot_date") -> list[ReportQuery]:
    """
    Return the ordered query battery for a program.

    Args:
        config: Program whose tables are queried
        slot_date_column: Name of the slot table's date column in this deployment
    """
    ensure_identifier(slot_date_column)
    if config.program is Program.PGP:
        return _pgp_queries(config, slot_date_column)
    return _standard_queries(config, slot_date_column)
