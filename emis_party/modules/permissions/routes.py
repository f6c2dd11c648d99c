from fastapi import APIRouter, Depends
from supabase import Client

from emis_party.config import Settings
from emis_party.core.dependencies import QueryOptions, get_query_options, get_settings
from emis_party.core.schemas import ListResponse
from emis_party.database.supabase_client import get_supabase
from emis_party.modules.permissions.schemas import (
    PermissionCreate, PermissionUpdate, PermissionResponse
)
from emis_party.modules.permissions.service import PermissionService

router = APIRouter(prefix="/permissions", tags=["permissions"])


def get_permission_service(
    supabase: Client = Depends(get_supabase),
    settings: Settings = Depends(get_settings)
) -> PermissionService:
    return PermissionService(supabase, settings)


@router.get("", response_model=ListResponse[PermissionResponse], response_model_exclude_unset=True)
def list_permissions(
    options: QueryOptions = Depends(get_query_options),
    service: PermissionService = Depends(get_permission_service)
):
    """List permissions"""
    return service.list(options)


@router.post("", response_model=PermissionResponse, status_code=201)
def create_permission(
    permission_data: PermissionCreate,
    service: PermissionService = Depends(get_permission_service)
):
    """Create a new permission; wildcard is derived when not given"""
    return service.create(permission_data)


@router.get("/{permission_id}", response_model=PermissionResponse, response_model_exclude_unset=True)
def get_permission(
    permission_id: str,
    options: QueryOptions = Depends(get_query_options),
    service: PermissionService = Depends(get_permission_service)
):
    """Get permission by ID"""
    return service.get_by_id(permission_id, options)


@router.patch("/{permission_id}", response_model=PermissionResponse)
def patch_permission(
    permission_id: str,
    permission_data: PermissionUpdate,
    service: PermissionService = Depends(get_permission_service)
):
    """Partially update permission"""
    return service.patch(permission_id, permission_data)


@router.put("/{permission_id}", response_model=PermissionResponse)
def put_permission(
    permission_id: str,
    permission_data: PermissionCreate,
    service: PermissionService = Depends(get_permission_service)
):
    """Replace permission"""
    return service.put(permission_id, permission_data)


@router.delete("/{permission_id}", response_model=PermissionResponse)
def delete_permission(
    permission_id: str,
    service: PermissionService = Depends(get_permission_service)
):
    """Delete permission and return it"""
    return service.delete(permission_id)
