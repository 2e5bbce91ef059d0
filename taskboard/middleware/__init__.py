"""HTTP middleware: request ID and poll interval headers.

Applied in main app; order matters (first added = outermost).
Import and use from taskboard.main.
"""

from taskboard.middleware.poll_interval import PollIntervalMiddleware
from taskboard.middleware.request_id import RequestIDMiddleware

__all__ = [
    "PollIntervalMiddleware",
    "RequestIDMiddleware",
]
