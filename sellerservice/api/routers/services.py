"""Services router, nested under a company."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from sellerservice.api.deps import (
    get_caller,
    get_catalog_service,
    get_optional_user_id,
    get_session,
)
from sellerservice.schemas.service import (
    CreateServiceRequest,
    ServiceListResponse,
    ServiceResponse,
    UpdateServiceRequest,
)
from sellerservice.services.access import Caller
from sellerservice.services.catalog_service import CatalogService

router = APIRouter()


@router.get("", response_model=ServiceListResponse, response_model_exclude_none=True)
async def list_services(
    company_id: int,
    session: AsyncSession = Depends(get_session),
    user_id: int | None = Depends(get_optional_user_id),
    svc: CatalogService = Depends(get_catalog_service),
) -> ServiceListResponse:
    return await svc.list_by_company(session, company_id, user_id)


@router.post(
    "",
    response_model=ServiceResponse,
    response_model_exclude_none=True,
    status_code=201,
)
async def create_service(
    company_id: int,
    body: CreateServiceRequest,
    session: AsyncSession = Depends(get_session),
    caller: Caller = Depends(get_caller),
    svc: CatalogService = Depends(get_catalog_service),
) -> ServiceResponse:
    return await svc.create(session, caller, company_id, body)


@router.get(
    "/{service_id}", response_model=ServiceResponse, response_model_exclude_none=True
)
async def get_service(
    company_id: int,
    service_id: int,
    session: AsyncSession = Depends(get_session),
    user_id: int | None = Depends(get_optional_user_id),
    svc: CatalogService = Depends(get_catalog_service),
) -> ServiceResponse:
    return await svc.get(session, company_id, service_id, user_id)


@router.put(
    "/{service_id}", response_model=ServiceResponse, response_model_exclude_none=True
)
async def update_service(
    company_id: int,
    service_id: int,
    body: UpdateServiceRequest,
    session: AsyncSession = Depends(get_session),
    caller: Caller = Depends(get_caller),
    svc: CatalogService = Depends(get_catalog_service),
) -> ServiceResponse:
    return await svc.update(session, caller, company_id, service_id, body)


@router.delete("/{service_id}", status_code=204)
async def delete_service(
    company_id: int,
    service_id: int,
    session: AsyncSession = Depends(get_session),
    caller: Caller = Depends(get_caller),
    svc: CatalogService = Depends(get_catalog_service),
) -> Response:
    await svc.delete(session, caller, company_id, service_id)
    return Response(status_code=204)
