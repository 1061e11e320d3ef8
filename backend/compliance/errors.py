"""Errors raised by the compliance engine."""


class ComplianceError(Exception):
    """A check could not be run at all."""

    code = "ENGINE_ERROR"

    def __init__(self, message: str, code: str | None = None):
        super().__init__(message)
        if code:
            self.code = code


class WeekNotFound(ComplianceError):
    code = "WEEK_NOT_FOUND"

    def __init__(self, week_id: str):
        super().__init__(f"Timesheet {week_id} not found")
        self.week_id = week_id


class WorkerNotFound(ComplianceError):
    code = "WORKER_NOT_FOUND"

    def __init__(self, worker_id: str):
        super().__init__(f"Worker {worker_id} not found")
        self.worker_id = worker_id


class InvalidTimeRange(ComplianceError):
    code = "INVALID_TIME_RANGE"

    def __init__(self, entry_id: str, start_time: str, end_time: str):
        super().__init__(f"Entry {entry_id} has an invalid time range {start_time}-{end_time}")
        self.entry_id = entry_id
