from fastapi import APIRouter, Depends
from supabase import Client

from emis_party.config import Settings
from emis_party.core.dependencies import QueryOptions, get_query_options, get_settings
from emis_party.core.schemas import ListResponse
from emis_party.database.supabase_client import get_supabase
from emis_party.modules.parties.schemas import (
    PartyCreate, PartyUpdate, PartyResponse
)
from emis_party.modules.parties.service import PartyService

router = APIRouter(prefix="/parties", tags=["parties"])


def get_party_service(
    supabase: Client = Depends(get_supabase),
    settings: Settings = Depends(get_settings)
) -> PartyService:
    return PartyService(supabase, settings)


@router.get("", response_model=ListResponse[PartyResponse], response_model_exclude_unset=True)
def list_parties(
    options: QueryOptions = Depends(get_query_options),
    service: PartyService = Depends(get_party_service)
):
    """List parties with their roles"""
    return service.list(options)


@router.post("", response_model=PartyResponse, status_code=201)
def create_party(
    party_data: PartyCreate,
    service: PartyService = Depends(get_party_service)
):
    """Create a new party; type, ownership and locale default from settings"""
    return service.create(party_data)


@router.get("/{party_id}", response_model=PartyResponse, response_model_exclude_unset=True)
def get_party(
    party_id: str,
    options: QueryOptions = Depends(get_query_options),
    service: PartyService = Depends(get_party_service)
):
    """Get party by ID"""
    return service.get_by_id(party_id, options)


@router.patch("/{party_id}", response_model=PartyResponse)
def patch_party(
    party_id: str,
    party_data: PartyUpdate,
    service: PartyService = Depends(get_party_service)
):
    """Partially update party"""
    return service.patch(party_id, party_data)


@router.put("/{party_id}", response_model=PartyResponse)
def put_party(
    party_id: str,
    party_data: PartyCreate,
    service: PartyService = Depends(get_party_service)
):
    """Replace party"""
    return service.put(party_id, party_data)


@router.delete("/{party_id}", response_model=PartyResponse)
def delete_party(
    party_id: str,
    service: PartyService = Depends(get_party_service)
):
    """Delete party and return it"""
    return service.delete(party_id)


@router.get("/{party_id}/parties", response_model=ListResponse[PartyResponse], response_model_exclude_unset=True)
def list_sub_parties(
    party_id: str,
    options: QueryOptions = Depends(get_query_options),
    service: PartyService = Depends(get_party_service)
):
    """List direct children of a party"""
    return service.list_children(party_id, options)
