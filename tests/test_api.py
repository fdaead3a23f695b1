import pytest
from fastapi import HTTPException
from pydantic import ValidationError
from sqlalchemy.orm import Session

import backend.api.v1.auth as auth_routes
import backend.api.v1.projects as project_routes
import backend.api.v1.tasks as task_routes
import backend.models as models
import backend.schemas as schemas
from backend.security import decode_access_token


def _register_user(session: Session, username: str, email: str, password: str = "secret123") -> models.User:
    user_in = schemas.UserCreate(username=username, email=email, password=password)
    auth_routes.signup(user_in, session)
    return session.query(models.User).filter(models.User.email == email).one()


def _create_project(session: Session, owner: models.User, title: str = "Demo Project") -> models.Project:
    return project_routes.create_project(schemas.ProjectCreate(title=title), session, owner)


def _create_task(session: Session, owner: models.User, project: models.Project, title: str, **fields) -> models.Task:
    task_in = schemas.TaskCreate(project_id=project.id, title=title, **fields)
    return task_routes.create_task(task_in, session, owner)


def test_signup_prevents_duplicate_emails(db_session: Session):
    user = _register_user(db_session, "alice", "alice@example.com")
    assert user.username == "alice"
    assert user.password_hash != "secret123"

    with pytest.raises(HTTPException) as exc:
        _register_user(db_session, "alice2", "alice@example.com")
    assert exc.value.status_code == 400
    assert exc.value.detail == "User already exists"


def test_login_returns_token_for_the_user(db_session: Session):
    user = _register_user(db_session, "bob", "bob@example.com", password="strongpass")

    result = auth_routes.login(schemas.UserLogin(email="bob@example.com", password="strongpass"), db_session)
    assert result.user.id == user.id
    assert decode_access_token(result.token)["sub"] == str(user.id)

    with pytest.raises(HTTPException) as exc:
        auth_routes.login(schemas.UserLogin(email="bob@example.com", password="wrong"), db_session)
    assert exc.value.status_code == 400
    assert exc.value.detail == "Invalid Credentials"


def test_project_owner_is_always_a_member(db_session: Session):
    owner = _register_user(db_session, "carol", "carol@example.com")
    project = _create_project(db_session, owner, title="Backend")

    assert project.owner_id == owner.id
    assert project.member_ids == [owner.id]
    assert project.members[0].role == models.MemberRole.OWNER
    assert project.members[0].is_owner
    assert project.status == models.ProjectStatus.ACTIVE


def test_projects_are_listed_only_for_members(db_session: Session):
    owner = _register_user(db_session, "dave", "dave@example.com")
    outsider = _register_user(db_session, "erin", "erin@example.com")
    first = _create_project(db_session, owner, title="First")
    second = _create_project(db_session, owner, title="Second")

    listed = project_routes.list_projects(db_session, owner)
    assert [project.id for project in listed] == [second.id, first.id]
    assert project_routes.list_projects(db_session, outsider) == []


def test_create_task_defaults_and_membership(db_session: Session):
    owner = _register_user(db_session, "frank", "frank@example.com")
    outsider = _register_user(db_session, "grace", "grace@example.com")
    project = _create_project(db_session, owner)

    task = _create_task(db_session, owner, project, "  Write docs  ")
    assert task.title == "Write docs"
    assert task.status == models.TaskStatus.TODO
    assert task.priority == models.TaskPriority.MEDIUM
    assert task.project_id == project.id

    with pytest.raises(HTTPException) as exc:
        _create_task(db_session, outsider, project, "Sneaky")
    assert exc.value.status_code == 401
    assert exc.value.detail == "Not authorized to add tasks to this project"


def test_blank_titles_are_rejected_by_the_schema():
    with pytest.raises(ValidationError):
        schemas.TaskCreate(project_id=1, title="   ")
    with pytest.raises(ValidationError):
        schemas.ProjectCreate(title="")


def test_list_tasks_is_newest_first(db_session: Session):
    owner = _register_user(db_session, "heidi", "heidi@example.com")
    project = _create_project(db_session, owner)
    titles = ["one", "two", "three"]
    for title in titles:
        _create_task(db_session, owner, project, title)

    listed = task_routes.list_tasks(project.id, db_session, owner)
    assert [task.title for task in listed] == ["three", "two", "one"]


def test_list_tasks_hides_projects_the_caller_is_not_in(db_session: Session):
    owner = _register_user(db_session, "ivan", "ivan@example.com")
    outsider = _register_user(db_session, "judy", "judy@example.com")
    project = _create_project(db_session, owner)
    _create_task(db_session, owner, project, "Private")

    assert task_routes.list_tasks(project.id, db_session, outsider) == []


def test_update_task_status(db_session: Session):
    owner = _register_user(db_session, "mallory", "mallory@example.com")
    project = _create_project(db_session, owner)
    task = _create_task(db_session, owner, project, "Ship it")

    updated = task_routes.update_task_status(
        task.id, schemas.TaskStatusUpdate(status="in-progress"), db_session, owner
    )
    assert updated.status == models.TaskStatus.IN_PROGRESS

    stored = db_session.query(models.Task).filter(models.Task.id == task.id).one()
    assert stored.status.value == "in-progress"


def test_update_task_status_failures(db_session: Session):
    owner = _register_user(db_session, "niaj", "niaj@example.com")
    outsider = _register_user(db_session, "olivia", "olivia@example.com")
    project = _create_project(db_session, owner)
    task = _create_task(db_session, owner, project, "Guarded")

    with pytest.raises(HTTPException) as exc:
        task_routes.update_task_status(9999, schemas.TaskStatusUpdate(status="done"), db_session, owner)
    assert exc.value.status_code == 404

    with pytest.raises(HTTPException) as exc:
        task_routes.update_task_status(task.id, schemas.TaskStatusUpdate(status="done"), db_session, outsider)
    assert exc.value.status_code == 401

    with pytest.raises(ValidationError):
        schemas.TaskStatusUpdate(status="archived")


def test_delete_task(db_session: Session):
    owner = _register_user(db_session, "peggy", "peggy@example.com")
    project = _create_project(db_session, owner)
    keep = _create_task(db_session, owner, project, "Keep")
    drop = _create_task(db_session, owner, project, "Drop")

    result = task_routes.delete_task(drop.id, db_session, owner)
    assert result.msg == "Task deleted"
    assert [task.id for task in task_routes.list_tasks(project.id, db_session, owner)] == [keep.id]


def test_delete_project_cascades_to_tasks(db_session: Session):
    owner = _register_user(db_session, "rupert", "rupert@example.com")
    project = _create_project(db_session, owner)
    other = _create_project(db_session, owner, title="Other")
    for index in range(4):
        _create_task(db_session, owner, project, f"Task {index}")
    survivor = _create_task(db_session, owner, other, "Survivor")
    project_id = project.id

    result = project_routes.delete_project(project_id, db_session, owner)
    assert result.msg == "Project deleted"

    assert task_routes.list_tasks(project_id, db_session, owner) == []
    assert db_session.query(models.Task).filter(models.Task.project_id == project_id).count() == 0
    assert db_session.query(models.ProjectMember).filter(models.ProjectMember.project_id == project_id).count() == 0
    assert [task.id for task in task_routes.list_tasks(other.id, db_session, owner)] == [survivor.id]


def test_only_the_owner_can_delete_a_project(db_session: Session):
    owner = _register_user(db_session, "sybil", "sybil@example.com")
    outsider = _register_user(db_session, "trent", "trent@example.com")
    project = _create_project(db_session, owner)

    with pytest.raises(HTTPException) as exc:
        project_routes.delete_project(project.id, db_session, outsider)
    assert exc.value.status_code == 404
    assert db_session.query(models.Project).count() == 1


def test_user_table_holds_only_fields_the_api_uses():
    assert "avatar" not in models.User.__table__.columns
