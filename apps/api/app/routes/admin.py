"""Admin moderation routes."""

from typing import Annotated

from fastapi import APIRouter, Depends, Path

from app.routes.dependencies import get_active_principal, get_moderation_service
from app.schemas.account import Account
from app.schemas.auth import AuthPrincipal
from app.schemas.common import DeletionResult
from app.schemas.error import ErrorResponse, NotFoundError
from app.schemas.post import Post
from app.services.moderation import ModerationService

router = APIRouter(
    prefix="/admin",
    tags=["Admin"],
    responses={401: {"model": ErrorResponse}, 403: {"model": ErrorResponse}},
)


@router.get("/users", response_model=list[Account])
async def list_accounts(
    principal: Annotated[AuthPrincipal, Depends(get_active_principal)],
    service: Annotated[ModerationService, Depends(get_moderation_service)],
) -> list[Account]:
    return service.list_accounts(principal=principal)


@router.delete(
    "/users/{userId}",
    response_model=DeletionResult,
    responses={400: {"model": ErrorResponse}, 404: {"model": NotFoundError}},
)
async def delete_account(
    user_id: Annotated[str, Path(alias="userId")],
    principal: Annotated[AuthPrincipal, Depends(get_active_principal)],
    service: Annotated[ModerationService, Depends(get_moderation_service)],
) -> DeletionResult:
    return service.delete_account(principal=principal, account_id=user_id)


@router.patch(
    "/users/{userId}/block",
    response_model=Account,
    responses={400: {"model": ErrorResponse}, 404: {"model": NotFoundError}},
)
async def block_account(
    user_id: Annotated[str, Path(alias="userId")],
    principal: Annotated[AuthPrincipal, Depends(get_active_principal)],
    service: Annotated[ModerationService, Depends(get_moderation_service)],
) -> Account:
    return service.set_blocked(principal=principal, account_id=user_id, blocked=True)


@router.patch(
    "/users/{userId}/unblock",
    response_model=Account,
    responses={400: {"model": ErrorResponse}, 404: {"model": NotFoundError}},
)
async def unblock_account(
    user_id: Annotated[str, Path(alias="userId")],
    principal: Annotated[AuthPrincipal, Depends(get_active_principal)],
    service: Annotated[ModerationService, Depends(get_moderation_service)],
) -> Account:
    return service.set_blocked(principal=principal, account_id=user_id, blocked=False)


@router.get("/posts", response_model=list[Post])
async def list_all_posts(
    principal: Annotated[AuthPrincipal, Depends(get_active_principal)],
    service: Annotated[ModerationService, Depends(get_moderation_service)],
) -> list[Post]:
    return service.list_all_posts(principal=principal)


@router.delete(
    "/posts/{postId}",
    response_model=DeletionResult,
    responses={400: {"model": ErrorResponse}, 404: {"model": NotFoundError}},
)
async def delete_any_post(
    post_id: Annotated[str, Path(alias="postId")],
    principal: Annotated[AuthPrincipal, Depends(get_active_principal)],
    service: Annotated[ModerationService, Depends(get_moderation_service)],
) -> DeletionResult:
    return service.delete_any_post(principal=principal, post_id=post_id)
