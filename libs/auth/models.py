from pydantic import BaseModel


class SessionUser(BaseModel):
    """
    The session principal stored under ``request.session["user"]``.
    """

    id: int
    email: str
    name: str = ""
    is_admin: bool = False
