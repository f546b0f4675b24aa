# backend/roombook/routes/v1/api_keys.py
"""
API key routes - API v1

    POST / - Create a key (secret returned once)
    GET / - List own keys (never the secret or its hash)
    DELETE /{key_id} - Delete own key
"""

import asyncio
from typing import List

from fastapi import APIRouter, Depends, Response, status

from ...api.dependencies.auth import get_current_user
from ...api.dependencies.services import get_api_key_service
from ...core.exceptions import DomainException
from ...models.user import User
from ...schemas.api_key import ApiKeyCreate, ApiKeyCreatedResponse, ApiKeyResponse
from ...services.api_key_service import ApiKeyService
from .common import handle_domain_exception

router = APIRouter(tags=["api-keys"])


@router.post("", response_model=ApiKeyCreatedResponse, status_code=status.HTTP_201_CREATED)
async def create_api_key(
    payload: ApiKeyCreate,
    current_user: User = Depends(get_current_user),
    api_key_service: ApiKeyService = Depends(get_api_key_service),
) -> ApiKeyCreatedResponse:
    try:
        api_key, secret = await asyncio.to_thread(
            api_key_service.create_key, current_user, payload.name
        )
    except DomainException as e:
        handle_domain_exception(e)
    return ApiKeyCreatedResponse(
        id=api_key.id,
        key=secret,
        prefix=api_key.key_prefix,
        name=api_key.name,
        created_at=api_key.created_at,
    )


@router.get("", response_model=List[ApiKeyResponse])
async def list_api_keys(
    current_user: User = Depends(get_current_user),
    api_key_service: ApiKeyService = Depends(get_api_key_service),
) -> List[ApiKeyResponse]:
    try:
        keys = await asyncio.to_thread(api_key_service.list_keys, current_user)
    except DomainException as e:
        handle_domain_exception(e)
    return [ApiKeyResponse.model_validate(key) for key in keys]


@router.delete("/{key_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_api_key(
    key_id: str,
    current_user: User = Depends(get_current_user),
    api_key_service: ApiKeyService = Depends(get_api_key_service),
) -> Response:
    try:
        await asyncio.to_thread(api_key_service.delete_key, current_user, key_id)
    except DomainException as e:
        handle_domain_exception(e)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
