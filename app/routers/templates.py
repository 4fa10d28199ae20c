from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.core.current_user import Identity, get_current_user
from app.core.deps import get_db
from app.core.permissions import require_professor
from app.core.utils import new_id, utcnow
from app.models.template import AssignmentTemplate
from app.schemas.template import TemplateCreate, TemplateRead, TemplateUpdate

router = APIRouter()


def _ensure_template_exists(db: Session, template_id: str) -> AssignmentTemplate:
    template = db.get(AssignmentTemplate, template_id)
    if not template:
        raise HTTPException(status_code=404, detail="Template not found")
    return template


def _ensure_template_owner(template: AssignmentTemplate, professor: Identity, action: str) -> None:
    if template.created_by != professor.user_id:
        raise HTTPException(
            status_code=403,
            detail=f"Only the template creator can {action} it",
        )


@router.post("", response_model=TemplateRead, status_code=status.HTTP_201_CREATED)
def create_template(
    payload: TemplateCreate,
    db: Session = Depends(get_db),
    professor: Identity = Depends(require_professor),
):
    if not payload.title or not payload.type:
        raise HTTPException(status_code=400, detail="Title and type are required")

    now = utcnow()
    template = AssignmentTemplate(
        id=new_id("template"),
        title=payload.title,
        description=payload.description,
        type=payload.type,
        instructions=payload.instructions,
        requirements=payload.requirements or [],
        due_date=payload.due_date,
        created_by=professor.user_id,
        created_at=now,
        updated_at=now,
    )
    db.add(template)
    db.commit()
    db.refresh(template)
    return template


# students and professors both browse every template
@router.get("", response_model=list[TemplateRead])
def list_templates(
    db: Session = Depends(get_db),
    me: Identity = Depends(get_current_user),
):
    return db.query(AssignmentTemplate).order_by(AssignmentTemplate.created_at).all()


@router.get("/{template_id}", response_model=TemplateRead)
def get_template(
    template_id: str,
    db: Session = Depends(get_db),
    me: Identity = Depends(get_current_user),
):
    return _ensure_template_exists(db, template_id)


@router.patch("/{template_id}", response_model=TemplateRead)
def update_template(
    template_id: str,
    payload: TemplateUpdate,
    db: Session = Depends(get_db),
    professor: Identity = Depends(require_professor),
):
    template = _ensure_template_exists(db, template_id)
    _ensure_template_owner(template, professor, "update")

    provided = payload.model_fields_set
    if payload.title:
        template.title = payload.title
    if payload.type:
        template.type = payload.type
    if "description" in provided:
        template.description = payload.description
    if "instructions" in provided:
        template.instructions = payload.instructions
    if "requirements" in provided:
        template.requirements = payload.requirements or []
    if "due_date" in provided:
        template.due_date = payload.due_date
    template.updated_at = utcnow()

    db.commit()
    db.refresh(template)
    return template


@router.delete("/{template_id}")
def delete_template(
    template_id: str,
    db: Session = Depends(get_db),
    professor: Identity = Depends(require_professor),
):
    template = _ensure_template_exists(db, template_id)
    _ensure_template_owner(template, professor, "delete")

    db.delete(template)
    db.commit()
    return {"message": "Template deleted successfully"}
