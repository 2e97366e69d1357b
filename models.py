from typing import Any, Dict

from pydantic import BaseModel, ConfigDict, Field


class JoinInfo(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    meeting: Dict[str, Any] = Field(alias="Meeting")
    attendee: Dict[str, Any] = Field(alias="Attendee")


class JoinResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    join_info: JoinInfo = Field(alias="JoinInfo")


class ErrorResponse(BaseModel):
    error: str
