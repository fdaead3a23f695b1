"""ProTasker task store: REST API over projects and their kanban tasks."""
