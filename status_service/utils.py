import json
import time
from typing import Any
from fastapi.responses import JSONResponse

def now_ms() -> int:
    return int(time.time() * 1000)

class PrettyJSONResponse(JSONResponse):
    """JSON body indented by two spaces and terminated by a newline."""

    def render(self, content: Any) -> bytes:
        return (json.dumps(content, indent=2) + "\n").encode("utf-8")

def normalize_path(path: str) -> str:
    """Lower-case the path and drop a trailing slash ('/STATUS/' -> '/status')."""
    path = path.lower()
    if len(path) > 1:
        path = path.rstrip("/") or "/"
    return path

class PathNormalizer:
    """ASGI middleware: route on the normalized path, the way Express matches by default."""

    def __init__(self, app):
        self.app = app

    async def __call__(self, scope, receive, send):
        if scope["type"] == "http":
            scope = dict(scope, path=normalize_path(scope["path"]))
        await self.app(scope, receive, send)
