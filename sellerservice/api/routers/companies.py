"""Companies router."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.ext.asyncio import AsyncSession

from sellerservice.api.deps import get_caller, get_company_service, get_session
from sellerservice.schemas.company import (
    CompanyFilterRequest,
    CompanyListResponse,
    CompanyResponse,
    CreateCompanyRequest,
    UpdateCompanyRequest,
)
from sellerservice.services.access import Caller
from sellerservice.services.company_service import CompanyService

router = APIRouter()


@router.get("", response_model=CompanyListResponse, response_model_exclude_none=True)
async def list_companies(
    tags: str | None = Query(None, description="comma-separated; matches any"),
    city: str | None = Query(None),
    page: int | None = Query(None, ge=1),
    limit: int | None = Query(None, ge=1, le=100),
    session: AsyncSession = Depends(get_session),
    svc: CompanyService = Depends(get_company_service),
) -> CompanyListResponse:
    request = CompanyFilterRequest(
        tags=[t.strip() for t in tags.split(",")] if tags else [],
        city=city,
        page=page,
        limit=limit,
    )
    return await svc.list(session, request)


@router.post(
    "",
    response_model=CompanyResponse,
    response_model_exclude_none=True,
    status_code=201,
)
async def create_company(
    body: CreateCompanyRequest,
    session: AsyncSession = Depends(get_session),
    caller: Caller = Depends(get_caller),
    svc: CompanyService = Depends(get_company_service),
) -> CompanyResponse:
    return await svc.create(session, caller, body)


@router.get("/{company_id}", response_model=CompanyResponse, response_model_exclude_none=True)
async def get_company(
    company_id: int,
    session: AsyncSession = Depends(get_session),
    svc: CompanyService = Depends(get_company_service),
) -> CompanyResponse:
    return await svc.get(session, company_id)


@router.put("/{company_id}", response_model=CompanyResponse, response_model_exclude_none=True)
async def update_company(
    company_id: int,
    body: UpdateCompanyRequest,
    session: AsyncSession = Depends(get_session),
    caller: Caller = Depends(get_caller),
    svc: CompanyService = Depends(get_company_service),
) -> CompanyResponse:
    return await svc.update(session, caller, company_id, body)


@router.delete("/{company_id}", status_code=204)
async def delete_company(
    company_id: int,
    session: AsyncSession = Depends(get_session),
    caller: Caller = Depends(get_caller),
    svc: CompanyService = Depends(get_company_service),
) -> Response:
    await svc.delete(session, caller, company_id)
    return Response(status_code=204)
