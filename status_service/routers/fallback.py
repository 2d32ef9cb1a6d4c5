from fastapi import APIRouter, Request
from starlette.exceptions import HTTPException as StarletteHTTPException

from status_service.schemas import ErrorResponse
from status_service.utils import PrettyJSONResponse

router = APIRouter()

ALL_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]

UNHANDLED = ErrorResponse(error="unhandled request", message="try GET/POST/PUT")


def unhandled_response() -> PrettyJSONResponse:
    return PrettyJSONResponse(status_code=400, content=UNHANDLED.model_dump())


# Must be included after every other router: it matches any path.
@router.api_route("/{path:path}", methods=ALL_METHODS, include_in_schema=False)
def unhandled_request(path: str):
    return unhandled_response()


async def routing_miss_handler(request: Request, exc: StarletteHTTPException):
    """Registered for 404 and 405 so framework routing misses get the same document."""
    return unhandled_response()
