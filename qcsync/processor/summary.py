"""
Human-readable run summaries for chat and the CLI.
"""

from ..db import SyncReport
from .reader import ORDER_COLUMN
from .writer import OUTPUT_FIRST_COLUMN, OUTPUT_LAST_COLUMN

MAX_FAILURE_LINES = 15


def render_summary(report: SyncReport, prefix: str = "C") -> str:
    """Render the summary message for a finished run."""
    if report.empty:
        return (
            f"No order numbers ({prefix}#1234) found in column {ORDER_COLUMN} "
            f"of the sheet. Nothing to do."
        )

    lines = [
        f"Sheet processed: {report.orders_seen} order row(s) with {prefix}# "
        f"found in column {ORDER_COLUMN}.",
        f"Wrote {OUTPUT_FIRST_COLUMN}-{OUTPUT_LAST_COLUMN} on {report.rows_written} row(s).",
    ]

    failures = report.failures
    if failures:
        lines.append(f"Failures ({len(failures)}):")
        for f in failures[:MAX_FAILURE_LINES]:
            lines.append(f"• Row {f.row_index} ({f.order_name}): {f.error}")
        if len(failures) > MAX_FAILURE_LINES:
            lines.append(f"…and {len(failures) - MAX_FAILURE_LINES} more")

    return "\n".join(lines)


def render_failure(error: BaseException) -> str:
    """Message posted when a run stops on an unexpected error."""
    return f"QC sync failed: {error}"
