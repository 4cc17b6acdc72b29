"""Request payloads for the HTTP API."""

from pydantic import BaseModel


class LoginRequest(BaseModel):
    """Login payload; missing fields decode to empty strings."""

    username: str = ""
    password: str = ""
