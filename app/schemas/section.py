from datetime import datetime

from pydantic import Field

from app.schemas.base import CamelModel


class SectionSave(CamelModel):
    user_id: str = Field(..., min_length=1)
    section_id: str = Field(..., min_length=1)
    content: str = ""


class SectionResponse(CamelModel):
    id: str
    user_id: str
    section_id: str
    content: str
    updated_at: datetime
