"""
Rating computation exceptions with caller-facing messages.
"""

EMPTY_INPUT_MESSAGE = (
    'No valid data found in the file. Make sure you have a "Name" column and score columns.'
)


class RatingError(Exception):
    """Base exception for rating computation errors."""
    def __init__(self, message: str, user_message: str = None):
        super().__init__(message)
        self.user_message = user_message or message


class EmptyInputError(RatingError):
    """Raised when normalization leaves no score records to rate."""
    def __init__(self, source: str = None):
        detail = f" in {source}" if source else ""
        super().__init__(f"No valid score records{detail}", EMPTY_INPUT_MESSAGE)


class ComputationError(RatingError):
    """Raised when the rating pass fails; no partial results are produced."""
    def __init__(self, details: str, round_seq: int = None):
        where = f" (round_seq={round_seq})" if round_seq is not None else ""
        super().__init__(
            f"Error computing ratings{where}: {details}",
            f"Error computing ratings: {details}",
        )
        self.round_seq = round_seq


class InputFileError(RatingError):
    """Raised when a score sheet or config file cannot be read or parsed."""
    def __init__(self, path: str, details: str):
        super().__init__(
            f"Error processing file {path}: {details}",
            f"Error processing file: {details}",
        )
        self.path = path
