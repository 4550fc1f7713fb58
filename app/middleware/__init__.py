"""
Middleware package for the application.
"""

from app.middleware.rate_limit import limiter, rate_limit_exceeded_handler
from app.middleware.request_id import RequestIDMiddleware

__all__ = [
    "limiter",
    "rate_limit_exceeded_handler",
    "RequestIDMiddleware",
]
