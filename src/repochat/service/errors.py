"""Errors raised by answer service components."""


class ProjectNotIndexedError(LookupError):
    """Raised when a question targets a project with no loaded index."""

    def __init__(self, project_id: str) -> None:
        super().__init__(f"No index loaded for project '{project_id}'")
        self.project_id = project_id
