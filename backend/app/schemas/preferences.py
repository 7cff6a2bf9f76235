from pydantic import BaseModel, Field


class PreferencesUpdate(BaseModel):
    link_order: list[str] | None = Field(default=None, max_length=1000)
    student_order: list[str] | None = Field(default=None, max_length=5000)


class PreferencesOut(BaseModel):
    link_order: list[str] = Field(default_factory=list)
    student_order: list[str] = Field(default_factory=list)

    model_config = {"from_attributes": True}
