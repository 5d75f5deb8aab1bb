from pydantic import BaseModel

from ouracoach.schemas.base import CamelModel


class StatusResponse(BaseModel):
    status: str = "ok"


class EnvCheckResponse(CamelModel):
    has_claude: bool
    has_openai: bool
    has_eleven_labs: bool


class SessionUser(CamelModel):
    id: str
    email: str | None = None
    name: str | None = None
