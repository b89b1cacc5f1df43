"""Account routes."""

from typing import Annotated

from fastapi import APIRouter, Depends, status

from app.adapters.identity import IdentityVerifier
from app.routes.dependencies import get_account_service, get_active_principal, get_identity_verifier
from app.schemas.account import Account, Role, UpdateProfileRequest
from app.schemas.auth import AuthPrincipal, AuthSession, FederatedAuthRequest, LoginRequest, RegisterRequest
from app.schemas.error import BlockedAccountError, ErrorResponse, NotFoundError, UpstreamFailureError
from app.schemas.post import Post
from app.services.accounts import AccountService

router = APIRouter(prefix="/users", tags=["Users"])


@router.post(
    "/register",
    response_model=AuthSession,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
def register(
    payload: RegisterRequest,
    service: Annotated[AccountService, Depends(get_account_service)],
) -> AuthSession:
    return service.register(payload)


@router.post(
    "/register-admin",
    response_model=AuthSession,
    status_code=status.HTTP_201_CREATED,
    responses={404: {"model": NotFoundError}, 409: {"model": ErrorResponse}},
)
def register_admin(
    payload: RegisterRequest,
    service: Annotated[AccountService, Depends(get_account_service)],
) -> AuthSession:
    return service.register(payload, role=Role.ADMIN)


@router.post(
    "/login",
    response_model=AuthSession,
    responses={401: {"model": ErrorResponse}, 403: {"model": BlockedAccountError}},
)
def login(
    payload: LoginRequest,
    service: Annotated[AccountService, Depends(get_account_service)],
) -> AuthSession:
    return service.login(payload)


@router.post(
    "/federated",
    response_model=AuthSession,
    responses={
        401: {"model": ErrorResponse},
        403: {"model": BlockedAccountError},
        404: {"model": NotFoundError},
        409: {"model": ErrorResponse},
        502: {"model": UpstreamFailureError},
    },
)
def federated_auth(
    payload: FederatedAuthRequest,
    service: Annotated[AccountService, Depends(get_account_service)],
    verifier: Annotated[IdentityVerifier, Depends(get_identity_verifier)],
) -> AuthSession:
    return service.federated(payload, verifier=verifier)


@router.get(
    "/me",
    response_model=Account,
    responses={401: {"model": ErrorResponse}, 403: {"model": BlockedAccountError}},
)
async def get_profile(
    principal: Annotated[AuthPrincipal, Depends(get_active_principal)],
    service: Annotated[AccountService, Depends(get_account_service)],
) -> Account:
    return service.get_profile(principal=principal)


@router.patch(
    "/me",
    response_model=Account,
    responses={401: {"model": ErrorResponse}, 403: {"model": BlockedAccountError}},
)
async def update_profile(
    payload: UpdateProfileRequest,
    principal: Annotated[AuthPrincipal, Depends(get_active_principal)],
    service: Annotated[AccountService, Depends(get_account_service)],
) -> Account:
    return service.update_profile(principal=principal, payload=payload)


@router.get(
    "/me/posts",
    response_model=list[Post],
    responses={401: {"model": ErrorResponse}, 403: {"model": BlockedAccountError}},
)
async def list_own_posts(
    principal: Annotated[AuthPrincipal, Depends(get_active_principal)],
    service: Annotated[AccountService, Depends(get_account_service)],
) -> list[Post]:
    return service.list_own_posts(principal=principal)
