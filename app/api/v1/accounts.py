"""
Account and contact endpoints.
"""
from typing import Optional

from fastapi import APIRouter, Depends, Query
from starlette import status

from app.core.deps import get_account_repo, get_contact_repo
from app.core.security import get_current_user
from app.models.account import Account, Contact
from app.repositories.account_repo import AccountRepository, ContactRepository
from app.schemas.account import AccountCreate, AccountResponse, ContactCreate, ContactResponse

router = APIRouter(dependencies=[Depends(get_current_user)])


@router.get("/accounts", response_model=list[AccountResponse])
async def list_accounts(
    q: Optional[str] = Query(default=None, description="Substring of name or industry"),
    repo: AccountRepository = Depends(get_account_repo),
):
    return await repo.get_all(query=q)


@router.post("/accounts", response_model=AccountResponse, status_code=status.HTTP_201_CREATED)
async def create_account(
    data: AccountCreate,
    repo: AccountRepository = Depends(get_account_repo),
):
    account = Account(
        name=data.name,
        industry=data.industry,
        website=data.website,
        revenue_range=data.revenue_range,
        tech_stack=data.tech_stack,
    )
    return await repo.create(account)


@router.get("/contacts", response_model=list[ContactResponse])
async def list_contacts(
    account_id: Optional[str] = Query(default=None, alias="accountId"),
    repo: ContactRepository = Depends(get_contact_repo),
):
    return await repo.get_all(account_id=account_id)


@router.post("/contacts", response_model=ContactResponse, status_code=status.HTTP_201_CREATED)
async def create_contact(
    data: ContactCreate,
    repo: ContactRepository = Depends(get_contact_repo),
):
    contact = Contact(
        account_id=data.account_id,
        name=data.name,
        email=data.email,
        phone=data.phone,
        title=data.title,
    )
    return await repo.create(contact)
