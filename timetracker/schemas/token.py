"""
Pydantic schemas for token responses.
"""
from pydantic import BaseModel


class Token(BaseModel):
    """Response schema returned after successful login."""
    access_token: str
    token_type: str = "bearer"
