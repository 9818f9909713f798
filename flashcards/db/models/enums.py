"""Model enums."""
from enum import Enum


class ProgressStatus(str, Enum):
    """Learning status of a word for one user. A missing record means ``NEW``."""

    NEW = "new"
    KNOWN = "known"
    UNKNOWN = "unknown"


class Decision(str, Enum):
    """Verdict a learner gives after revealing a card."""

    KNOWN = "known"
    UNKNOWN = "unknown"

    @property
    def status(self) -> ProgressStatus:
        return ProgressStatus(self.value)


PROGRESS_STATUS_VALUES = tuple(status.value for status in ProgressStatus)
