"""Comment routes."""

from typing import Annotated

from fastapi import APIRouter, Depends, Path, status

from app.routes.dependencies import get_active_principal, get_comment_service
from app.schemas.auth import AuthPrincipal
from app.schemas.comment import Comment, CreateCommentRequest
from app.schemas.error import ErrorResponse, NotFoundError
from app.schemas.post import PostDetail
from app.services.comments import CommentService

router = APIRouter(tags=["Comments"])


@router.post(
    "/posts/{postId}/comments",
    response_model=Comment,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": ErrorResponse},
        401: {"model": ErrorResponse},
        403: {"model": ErrorResponse},
        404: {"model": NotFoundError},
    },
)
async def create_comment(
    post_id: Annotated[str, Path(alias="postId")],
    payload: CreateCommentRequest,
    principal: Annotated[AuthPrincipal, Depends(get_active_principal)],
    service: Annotated[CommentService, Depends(get_comment_service)],
) -> Comment:
    return service.create_comment(principal=principal, post_id=post_id, text=payload.text)


@router.delete(
    "/posts/{postId}/comments/{commentId}",
    response_model=PostDetail,
    responses={
        400: {"model": ErrorResponse},
        401: {"model": ErrorResponse},
        403: {"model": ErrorResponse},
        404: {"model": NotFoundError},
    },
)
async def delete_comment(
    post_id: Annotated[str, Path(alias="postId")],
    comment_id: Annotated[str, Path(alias="commentId")],
    principal: Annotated[AuthPrincipal, Depends(get_active_principal)],
    service: Annotated[CommentService, Depends(get_comment_service)],
) -> PostDetail:
    return service.delete_comment(principal=principal, post_id=post_id, comment_id=comment_id)
