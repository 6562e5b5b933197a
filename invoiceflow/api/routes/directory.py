"""Customer and supplier directory endpoints.

Both directories share one shape, so the router is built per kind.
"""

from fastapi import APIRouter, Depends, status
from fastapi.responses import Response

from invoiceflow.api.dependencies import get_directory, get_parties_store
from invoiceflow.application.dto.requests import UpdatePartyRequest, UpsertPartyRequest
from invoiceflow.application.dto.responses import (
    ErrorResponse,
    PartyListResponse,
    PartyResponse,
)
from invoiceflow.core.entities.party import PartyKind
from invoiceflow.core.interfaces.stores import IPartyStore
from invoiceflow.core.services import DirectoryService


def build_directory_router(kind: PartyKind, prefix: str) -> APIRouter:
    router = APIRouter(prefix=prefix, tags=[prefix.rsplit("/", 1)[-1]])

    @router.get("", response_model=PartyListResponse)
    async def list_parties(
        store: IPartyStore = Depends(get_parties_store),
    ) -> PartyListResponse:
        parties = await store.list_parties(kind)
        return PartyListResponse(
            parties=[PartyResponse.from_entity(p) for p in parties],
            total=len(parties),
        )

    @router.put(
        "",
        response_model=PartyResponse,
        responses={400: {"model": ErrorResponse}},
    )
    async def upsert_party(
        request: UpsertPartyRequest,
        service: DirectoryService = Depends(get_directory),
    ) -> PartyResponse:
        """Create or refresh a record, keyed by phone or else by name."""
        party = await service.upsert(kind, request.name, request.phone, request.address)
        return PartyResponse.from_entity(party)

    @router.patch(
        "/{key}",
        response_model=PartyResponse,
        responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
    )
    async def update_party(
        key: str,
        request: UpdatePartyRequest,
        service: DirectoryService = Depends(get_directory),
    ) -> PartyResponse:
        party = await service.update(kind, key, request.changes())
        return PartyResponse.from_entity(party)

    @router.delete(
        "/{key}",
        status_code=status.HTTP_204_NO_CONTENT,
        responses={404: {"model": ErrorResponse}},
    )
    async def delete_party(
        key: str,
        service: DirectoryService = Depends(get_directory),
    ) -> Response:
        await service.delete(kind, key)
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    return router


customers_router = build_directory_router(PartyKind.CUSTOMER, "/api/customers")
suppliers_router = build_directory_router(PartyKind.SUPPLIER, "/api/suppliers")
