"""
Client Errors
=============

Every failure raised by the vendor clients derives from GenAIClientError.
Nothing is retried: the first failure aborts the current operation.
"""

from typing import Any, Optional


class GenAIClientError(RuntimeError):
    """Base class for all client failures"""


class RequestError(GenAIClientError):
    """Transport failure, non-2xx response or unparseable body"""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class SubmissionError(GenAIClientError):
    """A job could not be submitted or the submission response was malformed"""


class PollError(GenAIClientError):
    """A job status request returned no usable snapshot"""


class JobFailedError(GenAIClientError):
    """The vendor reported the job as failed"""

    def __init__(self, snapshot: Any):
        super().__init__(f"Job {getattr(snapshot, 'id', '?')} failed: {snapshot}")
        self.snapshot = snapshot
