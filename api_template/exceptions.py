"""
Api.Template — Custom Exception Hierarchy
===========================================

What:  Application-specific exceptions that map onto HTTP problem responses.
How:   Each exception carries a message, an HTTP status and an optional context
       dict. Handlers registered in main.py render them as RFC 7807 problem
       details; anything outside this hierarchy is caught by the exception
       handling middleware and rendered as a generic 500 problem.
Who:   Raised by services, routes and middleware.

Exception Hierarchy:
    ApiTemplateError (base)       → 500 Internal Server Error, or any
                                    status passed as `status_code`
"""

from typing import Any, Dict, Optional


class ApiTemplateError(Exception):
    """
    Base exception for all application errors.

    Attributes:
        message:      User-facing error description (returned as the problem `detail`)
        status_code:  HTTP status used for the problem response
        context:      Additional debug info (logged but NOT returned to client)
    """

    status_code: int = 500

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
        status_code: Optional[int] = None,
    ):
        self.message = message
        self.context = context or {}
        if status_code is not None:
            self.status_code = status_code
        super().__init__(self.message)

