from __future__ import annotations

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, Field

from src.infrastructure.api.dependencies import get_current_user
from src.infrastructure.database.supabase_client import UserInfo

router = APIRouter(
    prefix="/auth",
    tags=["Authentication"],
    responses={401: {"description": "Unauthorized - Invalid or missing authentication token"}},
)


class ValidateTokenResponse(BaseModel):
    """Response model for token validation."""
    user_id: str = Field(..., description="Unique identifier of the authenticated user")
    email: str | None = Field(None, description="Email address of the authenticated user", example="user@example.com")
    roles: list[str] = Field(default_factory=list, description="Roles granted to the user", example=["admin"])


@router.post(
    "/validate",
    response_model=ValidateTokenResponse,
    status_code=status.HTTP_200_OK,
    summary="Validate Authentication Token",
    description="""
    Validate the bearer token and return who it belongs to.

    The `admin` role is required to delete pictures and to run reconciliation.
    """,
)
def validate_token(user: UserInfo = Depends(get_current_user)):
    return ValidateTokenResponse(user_id=user.id, email=user.email, roles=sorted(user.roles))
