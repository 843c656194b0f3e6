from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.database import get_db
from app.schemas.section import SectionResponse, SectionSave
from app.services import section_service
from app.utils.response import create_response, handle_exception

router = APIRouter(tags=["Sections"])


@router.post("/save-section")
def save_section(body: SectionSave, db: Session = Depends(get_db)):
    try:
        section = section_service.save_section(db, body.user_id, body.section_id, body.content)
        payload = SectionResponse(
            id=section.id,
            user_id=section.user_id,
            section_id=section.section_id,
            content=section.content,
            updated_at=section.updated_at,
        )
        return create_response(payload, status_code=status.HTTP_200_OK)
    except Exception as exc:
        return handle_exception(exc, "Error saving section")


@router.get("/get-sections/{user_id}")
def get_sections(user_id: str, db: Session = Depends(get_db)):
    try:
        return create_response(section_service.get_sections(db, user_id), status_code=status.HTTP_200_OK)
    except Exception as exc:
        return handle_exception(exc, "Error fetching sections")
