from pydantic import BaseModel, EmailStr, Field, field_validator

from app.models.professional import TEACHER_KIND
from app.schemas.common import strip_or_none


class SchoolClassCreate(BaseModel):
    series: str = Field(default="", max_length=50)
    name: str = Field(min_length=1, max_length=100)

    @field_validator("series", "name")
    @classmethod
    def strip_value(cls, value: str) -> str:
        return value.strip()


class SchoolClassOut(SchoolClassCreate):
    id: str
    display_name: str

    model_config = {"from_attributes": True}


class SubjectCreate(BaseModel):
    name: str = Field(min_length=1, max_length=150)

    @field_validator("name")
    @classmethod
    def strip_name(cls, value: str) -> str:
        trimmed = value.strip()
        if not trimmed:
            raise ValueError("Name cannot be empty")
        return trimmed


class SubjectOut(SubjectCreate):
    id: str

    model_config = {"from_attributes": True}


class ProfessionalBase(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    alias: str | None = Field(default=None, max_length=100)
    kind: str = Field(default=TEACHER_KIND, min_length=1, max_length=50)
    photo_url: str | None = Field(default=None, max_length=500)
    email: EmailStr | None = None
    phone: str | None = Field(default=None, max_length=50)

    @field_validator("alias", "phone")
    @classmethod
    def normalize_optional(cls, value: str | None) -> str | None:
        return strip_or_none(value)


class ProfessionalCreate(ProfessionalBase):
    pass


class ProfessionalUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=200)
    alias: str | None = Field(default=None, max_length=100)
    kind: str | None = Field(default=None, min_length=1, max_length=50)
    photo_url: str | None = Field(default=None, max_length=500)
    email: EmailStr | None = None
    phone: str | None = Field(default=None, max_length=50)


class ProfessionalOut(ProfessionalBase):
    id: str
    display_name: str

    model_config = {"from_attributes": True}
