from datetime import datetime

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.models.section import Section


def _find_section(db: Session, user_id: str, section_id: str) -> Section | None:
    return (
        db.query(Section)
        .filter(Section.user_id == user_id, Section.section_id == section_id)
        .first()
    )


def save_section(db: Session, user_id: str, section_id: str, content: str) -> Section:
    """Create the (user, section) record or replace its content."""
    section = _find_section(db, user_id, section_id)
    if section:
        section.content = content
        section.updated_at = datetime.utcnow()
    else:
        section = Section(user_id=user_id, section_id=section_id, content=content)
        db.add(section)

    try:
        db.commit()
    except IntegrityError:
        # Lost an insert race for the same pair; apply as an update instead.
        db.rollback()
        section = _find_section(db, user_id, section_id)
        if section is None:
            raise
        section.content = content
        section.updated_at = datetime.utcnow()
        db.commit()

    db.refresh(section)
    return section


def get_sections(db: Session, user_id: str) -> dict[str, str]:
    sections = db.query(Section).filter(Section.user_id == user_id).all()
    return {section.section_id: section.content for section in sections}
