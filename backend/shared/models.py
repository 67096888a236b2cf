"""
Shared data models used across modules.

These models are shared infrastructure, not business logic.
Module-specific models should stay in their respective module directories.
"""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field


class AuthenticatedUser(BaseModel):
    """
    Represents an authenticated caller.

    Populated from the claims of a verified access token and made available
    to route handlers via dependency injection. Access tokens are stateless,
    so only the subject and the issue time are known here.
    """

    id: str = Field(..., description="User ID (subject of the access token)")
    token_id: Optional[str] = Field(None, description="jti of the presented token")
    issued_at: Optional[datetime] = Field(None, description="When the token was issued")
    expires_at: Optional[datetime] = Field(None, description="When the token expires")

    model_config = {
        "frozen": True,  # Make immutable for safety
        "extra": "ignore",
    }
