"""Project endpoints"""
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from loguru import logger
from sqlalchemy.orm import Session, selectinload

from backend.database import get_db
from backend.dependencies import get_current_user
from backend.models import MemberRole, Project, ProjectMember, User
from backend.schemas import MessageResponse, ProjectCreate, ProjectResponse

router = APIRouter(prefix="/projects", tags=["projects"])


def _project_query(db: Session):
    return db.query(Project).options(selectinload(Project.members))


@router.get("", response_model=List[ProjectResponse])
def list_projects(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Return every project the caller is a member of, newest first."""
    return (
        _project_query(db)
        .join(ProjectMember, ProjectMember.project_id == Project.id)
        .filter(ProjectMember.user_id == current_user.id)
        .order_by(Project.created_at.desc(), Project.id.desc())
        .all()
    )


@router.post("", response_model=ProjectResponse)
def create_project(
    project_in: ProjectCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Create a project owned by the caller; the owner is always a member."""
    project = Project(
        title=project_in.title,
        description=project_in.description,
        owner_id=current_user.id,
    )
    db.add(project)
    db.flush()
    db.add(ProjectMember(project_id=project.id, user_id=current_user.id, role=MemberRole.OWNER))
    db.commit()
    db.refresh(project)
    logger.info(f"User {current_user.id} created project {project.id}")
    return project


@router.delete("/{project_id}", response_model=MessageResponse)
def delete_project(
    project_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Delete a project together with all of its tasks and memberships."""
    project = (
        db.query(Project)
        .filter(Project.id == project_id, Project.owner_id == current_user.id)
        .first()
    )
    if not project:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Project not found")

    task_count = len(project.tasks)
    db.delete(project)
    db.commit()
    logger.info(f"User {current_user.id} deleted project {project_id} and {task_count} task(s)")
    return MessageResponse(msg="Project deleted")
