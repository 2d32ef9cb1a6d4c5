from pydantic import BaseModel, ConfigDict, Field
from typing import Optional

# Status document (GET /, /status, /status/{any})
class AppInfo(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    version: str
    port: int
    k_service: str
    k_revision: str
    service_account: str = Field(alias="serviceAccount")

class CallerInfo(BaseModel):
    apikey: Optional[str] = None # echoed, never validated

class EnginesInfo(BaseModel):
    python: str
    implementation: str

class UserInfo(BaseModel):
    username: Optional[str] = None
    uid: Optional[int] = None
    gid: Optional[int] = None
    homedir: Optional[str] = None
    shell: Optional[str] = None

class OSInfo(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    platform: str
    type: str
    release: str
    user_info: UserInfo = Field(alias="userInfo")

class StatusResponse(BaseModel):
    app: AppInfo
    caller: CallerInfo
    engines: EnginesInfo
    os: OSInfo
    milliseconds_since_epoch: int

# Fallback document
class ErrorResponse(BaseModel):
    error: str
    message: str
