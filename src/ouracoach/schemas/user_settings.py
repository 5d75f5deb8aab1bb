from pydantic import Field

from ouracoach.schemas.base import CamelModel


class OuraTokenUpdate(CamelModel):
    oura_token: str = Field(min_length=1)


class OuraTokenSaved(CamelModel):
    success: bool = True


class OuraTokenStatus(CamelModel):
    has_token: bool


class ProfileRead(CamelModel):
    biological_sex: str | None = None
