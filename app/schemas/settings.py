"""App settings API schemas."""

from pydantic import BaseModel, Field


class AppTitleRequest(BaseModel):
    title: str = Field(..., max_length=200)


class AppTitleResponse(BaseModel):
    title: str
