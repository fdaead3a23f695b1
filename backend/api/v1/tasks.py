"""Task endpoints"""
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from loguru import logger
from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from backend.database import get_db
from backend.dependencies import get_current_user
from backend.models import Project, ProjectMember, Task, User
from backend.schemas import MessageResponse, TaskCreate, TaskResponse, TaskStatusUpdate

router = APIRouter(prefix="/tasks", tags=["tasks"])


def _member_project_ids(user: User):
    return select(ProjectMember.project_id).where(ProjectMember.user_id == user.id)


def _project_query_for_member(db: Session, project_id: int, user: User):
    return (
        db.query(Project)
        .join(ProjectMember, ProjectMember.project_id == Project.id)
        .filter(Project.id == project_id, ProjectMember.user_id == user.id)
        .first()
    )


def _ensure_task_access(task_id: int, db: Session, user: User) -> Task:
    task = (
        db.query(Task)
        .options(selectinload(Task.project).selectinload(Project.members))
        .filter(Task.id == task_id)
        .first()
    )
    if not task:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Task not found")
    if not task.project.has_member(user.id):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authorized to modify this task")
    return task


@router.get("/{project_id}", response_model=List[TaskResponse])
def list_tasks(
    project_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Return the tasks of one project, newest first.

    Projects the caller cannot see, including deleted ones, simply have no
    tasks from the caller's point of view.
    """
    return (
        db.query(Task)
        .filter(
            Task.project_id == project_id,
            Task.project_id.in_(_member_project_ids(current_user)),
        )
        .order_by(Task.created_at.desc(), Task.id.desc())
        .all()
    )


@router.post("", response_model=TaskResponse)
def create_task(
    task_in: TaskCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    project = _project_query_for_member(db, task_in.project_id, current_user)
    if project is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authorized to add tasks to this project",
        )

    task = Task(
        project_id=project.id,
        title=task_in.title,
        description=task_in.description,
        priority=task_in.priority,
        assigned_to_id=task_in.assigned_to_id,
        due_date=task_in.due_date,
    )
    db.add(task)
    db.commit()
    db.refresh(task)
    logger.info(f"User {current_user.id} created task {task.id} in project {project.id}")
    return task


@router.patch("/{task_id}", response_model=TaskResponse)
def update_task_status(
    task_id: int,
    update: TaskStatusUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Move a task to another column. Status is the only mutable field."""
    task = _ensure_task_access(task_id, db, current_user)
    previous = task.status
    task.status = update.status
    db.commit()
    db.refresh(task)
    logger.info(f"Task {task.id}: {previous.value} -> {task.status.value}")
    return task


@router.delete("/{task_id}", response_model=MessageResponse)
def delete_task(
    task_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    task = _ensure_task_access(task_id, db, current_user)
    db.delete(task)
    db.commit()
    logger.info(f"User {current_user.id} deleted task {task_id}")
    return MessageResponse(msg="Task deleted")
