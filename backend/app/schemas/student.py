from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field, field_validator

from app.schemas.common import strip_or_none

StudentStatus = Literal["Laudo Atualizado", "Pendente Revisão", "Acompanhamento", "Aguardando Laudo"]
DEFAULT_STUDENT_STATUS: StudentStatus = "Aguardando Laudo"


class QuickAccess(BaseModel):
    communication_style: str = ""
    avoid: str = ""
    crisis_strategy: str = ""
    main_adaptation: str = ""


class Medication(BaseModel):
    info: str = ""
    impact: str = ""


class Behavior(BaseModel):
    triggers: str = ""
    regulation_strategy: str = ""


class Communication(BaseModel):
    expression: str = ""
    comprehension: str = ""


class Potential(BaseModel):
    interests: list[str] = Field(default_factory=list)
    strengths: str = ""
    rewards: str = ""

    @field_validator("interests", mode="before")
    @classmethod
    def split_interests(cls, value):
        if isinstance(value, str):
            return [item.strip() for item in value.split(",") if item.strip()]
        return value


class LearningStyle(BaseModel):
    format: str = ""
    time: str = ""
    environment: str = ""


class Sensory(BaseModel):
    auditory: str = ""
    visual: str = ""
    tactile: str = ""


class Autonomy(BaseModel):
    bathroom: str = ""
    food: str = ""
    materials: str = ""


class PcdProfile(BaseModel):
    quick_access: QuickAccess = Field(default_factory=QuickAccess)
    medication: Medication = Field(default_factory=Medication)
    behavior: Behavior = Field(default_factory=Behavior)
    communication: Communication = Field(default_factory=Communication)
    potential: Potential = Field(default_factory=Potential)
    learning_style: LearningStyle = Field(default_factory=LearningStyle)
    sensory: Sensory = Field(default_factory=Sensory)
    autonomy: Autonomy = Field(default_factory=Autonomy)


class FileAttachment(BaseModel):
    name: str = Field(min_length=1, max_length=300)
    date: str = ""
    size: str = ""
    type: Literal["pdf", "doc"] = "pdf"
    url: str | None = Field(default=None, max_length=2000)


class StudentBase(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    enrollment_id: str = Field(min_length=1, max_length=50)
    class_id: str | None = None
    pdt_id: str | None = None
    status: StudentStatus = DEFAULT_STUDENT_STATUS
    photo_url: str | None = None
    diagnosis: str | None = Field(default=None, max_length=500)
    pcd_profile: PcdProfile = Field(default_factory=PcdProfile)
    attachments: list[FileAttachment] = Field(default_factory=list)

    @field_validator("name", "enrollment_id")
    @classmethod
    def strip_required(cls, value: str) -> str:
        trimmed = value.strip()
        if not trimmed:
            raise ValueError("Value cannot be empty")
        return trimmed

    @field_validator("class_id", "pdt_id", "diagnosis", "photo_url")
    @classmethod
    def normalize_optional(cls, value: str | None) -> str | None:
        return strip_or_none(value)


class StudentCreate(StudentBase):
    pass


class StudentUpdate(StudentBase):
    pass


class StudentOut(StudentBase):
    id: str
    class_name: str | None = None
    pdt_name: str | None = None
    attachments_count: int = 0
    created_by: str | None = None
    created_by_id: str | None = None
    updated_by: str | None = None
    updated_by_id: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    model_config = {"from_attributes": True}
