"""Error kinds surfaced to the user as a one-line message and an exit code."""


class TrackerError(Exception):
    exit_code = 1


class UsageError(TrackerError):
    """Malformed or missing command-line arguments. Raised before storage is opened."""

    exit_code = 2


class ValidationError(TrackerError):
    pass


class InvalidAttempt(ValidationError):
    def __init__(self, attempt):
        super().__init__(f"Attempt must be 1, 2, or 3 (got {attempt})")
        self.attempt = attempt


class NotFound(TrackerError):
    def __init__(self, problem_id: int):
        super().__init__(f"Problem with ID {problem_id} not found")
        self.problem_id = problem_id


class StorageError(TrackerError):
    pass


class SchemaError(StorageError):
    pass
