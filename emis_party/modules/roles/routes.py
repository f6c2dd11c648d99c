from fastapi import APIRouter, Depends
from supabase import Client

from emis_party.config import Settings
from emis_party.core.dependencies import QueryOptions, get_query_options, get_settings
from emis_party.core.schemas import ListResponse
from emis_party.database.supabase_client import get_supabase
from emis_party.modules.roles.schemas import (
    RoleCreate, RoleUpdate, RoleResponse
)
from emis_party.modules.roles.service import RoleService

router = APIRouter(prefix="/roles", tags=["roles"])


def get_role_service(
    supabase: Client = Depends(get_supabase),
    settings: Settings = Depends(get_settings)
) -> RoleService:
    return RoleService(supabase, settings)


@router.get("", response_model=ListResponse[RoleResponse], response_model_exclude_unset=True)
def list_roles(
    options: QueryOptions = Depends(get_query_options),
    service: RoleService = Depends(get_role_service)
):
    """List roles with their permissions"""
    return service.list(options)


@router.post("", response_model=RoleResponse, status_code=201)
def create_role(
    role_data: RoleCreate,
    service: RoleService = Depends(get_role_service)
):
    """Create a new role; referenced permissions must exist"""
    return service.create(role_data)


@router.get("/{role_id}", response_model=RoleResponse, response_model_exclude_unset=True)
def get_role(
    role_id: str,
    options: QueryOptions = Depends(get_query_options),
    service: RoleService = Depends(get_role_service)
):
    """Get role by ID"""
    return service.get_by_id(role_id, options)


@router.patch("/{role_id}", response_model=RoleResponse)
def patch_role(
    role_id: str,
    role_data: RoleUpdate,
    service: RoleService = Depends(get_role_service)
):
    """Partially update role"""
    return service.patch(role_id, role_data)


@router.put("/{role_id}", response_model=RoleResponse)
def put_role(
    role_id: str,
    role_data: RoleCreate,
    service: RoleService = Depends(get_role_service)
):
    """Replace role"""
    return service.put(role_id, role_data)


@router.delete("/{role_id}", response_model=RoleResponse)
def delete_role(
    role_id: str,
    service: RoleService = Depends(get_role_service)
):
    """Delete role and return it"""
    return service.delete(role_id)
