"""
Api.Template — Problem Details (RFC 7807) Responses
=====================================================

What:  Builds the standardized error body returned for every failed request.
How:   `problem_response()` assembles a problem dict, runs it through
       `customize_problem_details()` and wraps it in a JSONResponse with the
       `application/problem+json` media type.
Who:   Used by the exception handlers and middleware registered in main.py.

Example body:
    {
        "type": "https://tools.ietf.org/html/rfc9110#section-15.6.1",
        "title": "An error occurred while processing your request.",
        "status": 500,
        "instance": "/WeatherForecast",
        "traceId": "3f0c7a1e-..."
    }

Compatibility:
    When a problem carries an `errors` member (request validation failures),
    the same value is also exposed as `validationErrors` for older clients.
"""

from http import HTTPStatus
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field
from starlette.requests import Request
from starlette.responses import JSONResponse

from api_template.middleware.correlation import correlation_id_var

PROBLEM_MEDIA_TYPE = "application/problem+json"

# Reference URIs for the statuses the template produces
_TYPE_URIS: Dict[int, str] = {
    400: "https://tools.ietf.org/html/rfc9110#section-15.5.1",
    403: "https://tools.ietf.org/html/rfc9110#section-15.5.4",
    404: "https://tools.ietf.org/html/rfc9110#section-15.5.5",
    405: "https://tools.ietf.org/html/rfc9110#section-15.5.6",
    422: "https://tools.ietf.org/html/rfc4918#section-11.2",
    500: "https://tools.ietf.org/html/rfc9110#section-15.6.1",
    503: "https://tools.ietf.org/html/rfc9110#section-15.6.4",
}

_SERVER_ERROR_TITLE = "An error occurred while processing your request."


class ProblemDetails(BaseModel):
    """Schema of the problem body, used for OpenAPI documentation."""

    type: str = Field(default="about:blank", description="URI reference identifying the problem type")
    title: str = Field(description="Short, human-readable summary of the problem type")
    status: int = Field(description="HTTP status code")
    detail: Optional[str] = Field(default=None, description="Explanation specific to this occurrence")
    instance: Optional[str] = Field(default=None, description="Request path that produced the problem")
    traceId: Optional[str] = Field(default=None, description="Correlation ID for tracing in server logs")

    model_config = {"extra": "allow"}


def default_title(status: int) -> str:
    if status == 500:
        return _SERVER_ERROR_TITLE
    try:
        return HTTPStatus(status).phrase
    except ValueError:
        return "Error"


def customize_problem_details(problem: Dict[str, Any]) -> Dict[str, Any]:
    """Mirror `errors` under `validationErrors` when present."""
    if "errors" in problem:
        problem["validationErrors"] = problem["errors"]
    return problem


def build_problem(
    status: int,
    instance: Optional[str] = None,
    title: Optional[str] = None,
    detail: Optional[str] = None,
    extensions: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    """Assemble a customized problem-details dict."""
    problem: Dict[str, Any] = {
        "type": _TYPE_URIS.get(status, "about:blank"),
        "title": title or default_title(status),
        "status": status,
    }
    if detail:
        problem["detail"] = detail
    if instance:
        problem["instance"] = instance
    rid = correlation_id_var.get("")
    if rid:
        problem["traceId"] = rid
    if extensions:
        problem.update(extensions)
    return customize_problem_details(problem)


def problem_response(
    request: Request,
    status: int,
    title: Optional[str] = None,
    detail: Optional[str] = None,
    extensions: Optional[Dict[str, Any]] = None,
    headers: Optional[Dict[str, str]] = None,
) -> JSONResponse:
    """Render a problem-details body for `request` as a JSONResponse."""
    return JSONResponse(
        status_code=status,
        content=build_problem(
            status,
            instance=request.url.path,
            title=title,
            detail=detail,
            extensions=extensions,
        ),
        media_type=PROBLEM_MEDIA_TYPE,
        headers=headers,
    )
