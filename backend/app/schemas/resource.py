from pydantic import BaseModel, Field


class ResourceBase(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    type: str = Field(min_length=1, max_length=100)
    details: str = Field(default="", max_length=500)
    icon_bg: str | None = Field(default=None, max_length=50)
    icon_color: str | None = Field(default=None, max_length=50)


class ResourceCreate(ResourceBase):
    pass


class ResourceUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=100)
    type: str | None = Field(default=None, min_length=1, max_length=100)
    details: str | None = Field(default=None, max_length=500)
    icon_bg: str | None = Field(default=None, max_length=50)
    icon_color: str | None = Field(default=None, max_length=50)


class ResourceOut(ResourceBase):
    id: str

    model_config = {"from_attributes": True}


class ResourceTypeCreate(BaseModel):
    label: str = Field(min_length=1, max_length=150)


class ResourceTypeOut(BaseModel):
    value: str
    label: str

    model_config = {"from_attributes": True}
