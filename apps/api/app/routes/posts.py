"""Post routes."""

from typing import Annotated

from fastapi import APIRouter, Depends, File, Form, Path, Query, UploadFile, status

from app.routes.dependencies import get_active_principal, get_post_service
from app.schemas.auth import AuthPrincipal
from app.schemas.common import DeletionResult
from app.schemas.error import BlockedAccountError, ErrorResponse, NotFoundError, UpstreamFailureError
from app.schemas.post import LikeStatus, Post, PostDetail, PostDraft, PostPatch, parse_tags
from app.services.posts import PostService
from app.services.uploads import ImageUpload

router = APIRouter(prefix="/posts", tags=["Posts"])


def _image_upload(image: UploadFile | None) -> ImageUpload | None:
    if image is None or not image.filename:
        return None
    return ImageUpload(filename=image.filename, content_type=image.content_type, stream=image.file)


@router.post(
    "",
    response_model=Post,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": ErrorResponse},
        401: {"model": ErrorResponse},
        403: {"model": BlockedAccountError},
        502: {"model": UpstreamFailureError},
    },
)
def create_post(
    principal: Annotated[AuthPrincipal, Depends(get_active_principal)],
    service: Annotated[PostService, Depends(get_post_service)],
    title: Annotated[str, Form(min_length=1, max_length=200)],
    content: Annotated[str, Form(min_length=1)],
    category: Annotated[str | None, Form()] = None,
    tags: Annotated[str | None, Form(description="Comma-separated tags")] = None,
    image: Annotated[UploadFile | None, File()] = None,
) -> Post:
    draft = PostDraft(title=title, content=content, category=category, tags=parse_tags(tags) or [])
    return service.create_post(principal=principal, draft=draft, image=_image_upload(image))


@router.get("", response_model=list[Post])
async def list_posts(
    service: Annotated[PostService, Depends(get_post_service)],
    keyword: Annotated[str | None, Query()] = None,
    category: Annotated[str | None, Query()] = None,
    tag: Annotated[str | None, Query()] = None,
) -> list[Post]:
    return service.list_posts(keyword=keyword, category=category, tag=tag)


@router.get(
    "/by-author/{userId}",
    response_model=list[Post],
    responses={400: {"model": ErrorResponse}},
)
async def list_posts_by_author(
    user_id: Annotated[str, Path(alias="userId")],
    service: Annotated[PostService, Depends(get_post_service)],
) -> list[Post]:
    return service.list_posts_by_author(author_id=user_id)


@router.get(
    "/{postId}",
    response_model=PostDetail,
    responses={400: {"model": ErrorResponse}, 404: {"model": NotFoundError}},
)
async def get_post(
    post_id: Annotated[str, Path(alias="postId")],
    service: Annotated[PostService, Depends(get_post_service)],
) -> PostDetail:
    return service.get_post(post_id=post_id)


@router.put(
    "/{postId}",
    response_model=Post,
    responses={
        400: {"model": ErrorResponse},
        401: {"model": ErrorResponse},
        403: {"model": ErrorResponse},
        404: {"model": NotFoundError},
        502: {"model": UpstreamFailureError},
    },
)
def update_post(
    post_id: Annotated[str, Path(alias="postId")],
    principal: Annotated[AuthPrincipal, Depends(get_active_principal)],
    service: Annotated[PostService, Depends(get_post_service)],
    title: Annotated[str | None, Form(min_length=1, max_length=200)] = None,
    content: Annotated[str | None, Form(min_length=1)] = None,
    category: Annotated[str | None, Form()] = None,
    tags: Annotated[str | None, Form(description="Comma-separated tags")] = None,
    image: Annotated[UploadFile | None, File()] = None,
) -> Post:
    patch = PostPatch(title=title, content=content, category=category, tags=parse_tags(tags))
    return service.update_post(principal=principal, post_id=post_id, patch=patch, image=_image_upload(image))


@router.delete(
    "/{postId}",
    response_model=DeletionResult,
    responses={
        400: {"model": ErrorResponse},
        401: {"model": ErrorResponse},
        403: {"model": ErrorResponse},
        404: {"model": NotFoundError},
    },
)
async def delete_post(
    post_id: Annotated[str, Path(alias="postId")],
    principal: Annotated[AuthPrincipal, Depends(get_active_principal)],
    service: Annotated[PostService, Depends(get_post_service)],
) -> DeletionResult:
    return service.delete_post(principal=principal, post_id=post_id)


@router.post(
    "/{postId}/like",
    response_model=LikeStatus,
    responses={
        400: {"model": ErrorResponse},
        401: {"model": ErrorResponse},
        404: {"model": NotFoundError},
        409: {"model": ErrorResponse},
    },
)
async def like_post(
    post_id: Annotated[str, Path(alias="postId")],
    principal: Annotated[AuthPrincipal, Depends(get_active_principal)],
    service: Annotated[PostService, Depends(get_post_service)],
) -> LikeStatus:
    return service.like_post(principal=principal, post_id=post_id)


@router.post(
    "/{postId}/unlike",
    response_model=LikeStatus,
    responses={400: {"model": ErrorResponse}, 401: {"model": ErrorResponse}, 404: {"model": NotFoundError}},
)
async def unlike_post(
    post_id: Annotated[str, Path(alias="postId")],
    principal: Annotated[AuthPrincipal, Depends(get_active_principal)],
    service: Annotated[PostService, Depends(get_post_service)],
) -> LikeStatus:
    return service.unlike_post(principal=principal, post_id=post_id)
