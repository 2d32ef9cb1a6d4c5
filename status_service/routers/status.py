from fastapi import APIRouter, Depends, Header, Request
from typing import Optional
import os
import platform
import sys

from status_service.config import AppConfig
from status_service.schemas import (
    AppInfo,
    CallerInfo,
    EnginesInfo,
    OSInfo,
    StatusResponse,
    UserInfo,
)
from status_service.utils import PrettyJSONResponse, now_ms

try:
    import pwd
except ImportError:  # Windows
    pwd = None

router = APIRouter()

POWERED_BY = "python/fastapi"
STATUS_METHODS = ["GET", "HEAD"]


def get_config(request: Request) -> AppConfig:
    return request.app.state.config


def parse_apikey(authorization: Optional[str]) -> Optional[str]:
    """'Bearer abc123' -> 'abc123'. Anything not of the form '<scheme> <key>' -> None."""
    if not authorization:
        return None
    parts = authorization.split(" ")
    if len(parts) != 2 or not parts[1]:
        return None
    return parts[1]


def _implementation() -> str:
    impl = sys.implementation
    v = impl.version
    version = f"{v.major}.{v.minor}.{v.micro}"
    if v.releaselevel != "final":
        version += f"{v.releaselevel[0]}{v.serial}"
    return f"{impl.name}-{version}"


def _user_info() -> UserInfo:
    info = UserInfo()
    if hasattr(os, "getuid"):
        info.uid = os.getuid()
        info.gid = os.getgid()
    if pwd is not None and info.uid is not None:
        try:
            entry = pwd.getpwuid(info.uid)
        except KeyError:
            # uid without a passwd entry (common in containers)
            entry = None
        if entry is not None:
            info.username = entry.pw_name
            info.homedir = entry.pw_dir
            info.shell = entry.pw_shell or None
    if info.username is None:
        info.username = os.getenv("USER") or os.getenv("USERNAME")
    if info.homedir is None:
        info.homedir = os.path.expanduser("~")
    return info


def build_status(config: AppConfig, apikey: Optional[str]) -> StatusResponse:
    return StatusResponse(
        app=AppInfo(
            version=config.version,
            port=config.port,
            k_service=config.k_service,
            k_revision=config.k_revision,
            service_account=config.service_account,
        ),
        caller=CallerInfo(apikey=apikey),
        engines=EnginesInfo(
            python=platform.python_version(),
            implementation=_implementation(),
        ),
        os=OSInfo(
            platform=sys.platform,
            type=platform.system(),
            release=platform.release(),
            user_info=_user_info(),
        ),
        milliseconds_since_epoch=now_ms(),
    )


def status_response(config: AppConfig, authorization: Optional[str]) -> PrettyJSONResponse:
    body = build_status(config, parse_apikey(authorization))
    return PrettyJSONResponse(
        content=body.model_dump(by_alias=True),
        headers={"x-powered-by": POWERED_BY},
    )


@router.api_route("/", methods=STATUS_METHODS)
def root(
    authorization: Optional[str] = Header(None),
    config: AppConfig = Depends(get_config),
):
    return status_response(config, authorization)


@router.api_route("/status", methods=STATUS_METHODS)
def status(
    authorization: Optional[str] = Header(None),
    config: AppConfig = Depends(get_config),
):
    return status_response(config, authorization)


@router.api_route("/status/{segment}", methods=STATUS_METHODS)
def status_any(
    segment: str,
    authorization: Optional[str] = Header(None),
    config: AppConfig = Depends(get_config),
):
    return status_response(config, authorization)
