# Role: Lifecycle of one submission as seen by the presentation layer.

from enum import Enum


class SubmissionState(str, Enum):
    IDLE = "idle"
    SENDING = "sending"
    AWAITING_DISPLAY = "awaiting_display"
