from pydantic import BaseModel


class CurrentUser(BaseModel):
    """Authenticated teacher, as identified by the external auth provider."""

    id: str
