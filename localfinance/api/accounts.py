"""Accounts API endpoints."""

from typing import List

from fastapi import APIRouter, Query, Request, Response, status

from localfinance.api.models import AccountCreate, AccountResponse, AccountUpdate
from localfinance.infrastructure.dependencies import AccountRepositoryDep

router = APIRouter()


@router.get("", response_model=List[AccountResponse])
async def get_accounts(
    account_repo: AccountRepositoryDep,
    include_archived: bool = Query(
        False, alias="includeArchived", description="Include archived accounts"
    ),
):
    """
    Get accounts in creation order.

    Archived accounts are left out unless includeArchived=true.
    """
    accounts = await account_repo.get_all(include_archived=include_archived)
    return [AccountResponse.from_account(account) for account in accounts]


@router.get("/{account_id}", response_model=AccountResponse, name="get_account")
async def get_account(account_id: str, account_repo: AccountRepositoryDep):
    """Get a single account, archived or not."""
    account = await account_repo.get(account_id)
    return AccountResponse.from_account(account)


@router.post(
    "",
    response_model=AccountResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_account(
    body: AccountCreate,
    request: Request,
    response: Response,
    account_repo: AccountRepositoryDep,
):
    """Create an account; the Location header points at the new resource."""
    account = await account_repo.create(body.to_draft())
    response.headers["Location"] = str(
        request.url_for("get_account", account_id=account.id)
    )
    return AccountResponse.from_account(account)


@router.put("/{account_id}", response_model=AccountResponse)
async def update_account(
    account_id: str, body: AccountUpdate, account_repo: AccountRepositoryDep
):
    """
    Update an account.

    The body must carry the rowVersion from the last read; a stale value
    is answered with 409 and the currently stored account.
    """
    account = await account_repo.update(
        account_id, body.to_draft(), body.decoded_row_version()
    )
    return AccountResponse.from_account(account)


@router.delete("/{account_id}", status_code=status.HTTP_204_NO_CONTENT)
async def archive_account(account_id: str, account_repo: AccountRepositoryDep):
    """Archive (soft delete) an account."""
    await account_repo.archive(account_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{account_id}/unarchive", status_code=status.HTTP_204_NO_CONTENT)
async def unarchive_account(account_id: str, account_repo: AccountRepositoryDep):
    """Restore an archived account."""
    await account_repo.unarchive(account_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
