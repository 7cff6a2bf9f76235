from typing import Literal

from pydantic import BaseModel, Field

LinkCategory = Literal["drive", "system", "pdf", "video", "calendar", "folder", "upload"]


class PortalLinkCreate(BaseModel):
    title: str = Field(min_length=1, max_length=200)
    description: str = Field(default="", max_length=500)
    category: LinkCategory = "folder"
    url: str = Field(min_length=1, max_length=1000)


class PortalLinkOut(PortalLinkCreate):
    id: str

    model_config = {"from_attributes": True}
