from typing import Dict, List, Optional

from emis_party.core.crud import CrudService
from emis_party.core.exceptions import field_error
from emis_party.modules.permissions.models import TABLE as PERMISSIONS_TABLE
from emis_party.modules.permissions.service import PermissionService
from emis_party.modules.roles.models import MODEL_NAME, TABLE
from emis_party.modules.roles.schemas import RoleResponse


class RoleService(CrudService):
    table = TABLE
    model_name = MODEL_NAME
    response_model = RoleResponse
    columns = ("id", "type", "name", "description", "permissions", "created_at", "updated_at")
    required = ("name",)
    array_columns = ("permissions",)
    uuid_columns = ("id", "permissions")
    searchable = ("type", "name", "description")
    unique_fields = ("name",)
    references = {"permissions": PERMISSIONS_TABLE}

    def prepare(self, record: dict) -> dict:
        if not record.get("type"):
            record["type"] = self.settings.default_role_type
        return record

    def validate(self, record: dict, record_id: Optional[str] = None) -> List[Dict[str, str]]:
        errors = []
        role_types = self.settings.get_role_types_list()
        if record["type"] not in role_types:
            errors.append(field_error("type", f"Must be one of {', '.join(role_types)}", "enum"))
        errors.extend(self.check_references("permissions", PERMISSIONS_TABLE, record.get("permissions") or []))
        return errors

    def populate(self, rows: List[dict]) -> List[dict]:
        """Replace permission ids with permission records"""
        ids = [pid for row in rows for pid in (row.get("permissions") or [])]
        if not ids:
            return rows
        permissions = PermissionService(self.supabase, self.settings).find_many(ids)
        for row in rows:
            if row.get("permissions") is not None:
                row["permissions"] = [permissions[pid] for pid in row["permissions"] if pid in permissions]
        return rows
