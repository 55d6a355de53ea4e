"""Labels and message templates for the checker report."""

REPORT_TITLE = "Service Check Report"

REPORT_COLUMNS = (
    "Timestamp",
    "Target",
    "Kind",
    "Status",
    "Action",
    "Result",
    "Attempts",
)

REPORT_SUMMARY = "{checked} target(s) checked, {unhealthy} unhealthy"

REPORT_NOTHING_TO_SHOW = "All targets healthy (quiet mode: nothing to report)."

STATUS_STYLES = {
    "healthy": "green",
    "unhealthy": "bold red",
}

RESULT_NOT_APPLICABLE = "n/a"
RESULT_SUCCESS = "success"
RESULT_FAILED = "failed"
