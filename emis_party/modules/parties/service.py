from typing import Dict, List, Optional, Sequence

import phonenumbers

from emis_party.core.crud import CrudService, is_uuid
from emis_party.core.exceptions import NotFoundError, field_error
from emis_party.core.query import QueryOptions
from emis_party.core.schemas import ListResponse
from emis_party.modules.parties.models import MODEL_NAME, TABLE
from emis_party.modules.parties.schemas import PartyResponse
from emis_party.modules.roles.models import TABLE as ROLES_TABLE
from emis_party.modules.roles.service import RoleService


SUMMARY_COLUMNS = ("id", "type", "name", "phone", "email")


def is_phone_number(value: str, region: str) -> bool:
    """True when value parses as a possible mobile number; "+" numbers ignore region."""
    try:
        number = phonenumbers.parse(value, region)
    except phonenumbers.NumberParseException:
        return False
    return phonenumbers.is_possible_number_for_type(number, phonenumbers.PhoneNumberType.MOBILE)


class PartyService(CrudService):
    table = TABLE
    model_name = MODEL_NAME
    response_model = PartyResponse
    columns = (
        "id", "party", "type", "ownership", "phases", "name", "avatar",
        "phone", "landline", "fax", "email", "website", "about",
        "physical_address", "postal_address", "locale", "location", "roles",
        "created_at", "updated_at",
    )
    required = ("name", "phone", "email")
    array_columns = ("phases", "roles")
    uuid_columns = ("id", "party", "roles")
    searchable = (
        "name", "phone", "landline", "fax", "email", "website", "about",
        "physical_address", "postal_address",
    )
    unique_fields = ("type", "name", "phone", "email")
    references = {"party": TABLE, "roles": ROLES_TABLE}

    def prepare(self, record: dict) -> dict:
        """Apply configured defaults and lower-case email and website"""
        record["type"] = record.get("type") or self.settings.default_party_type
        record["ownership"] = record.get("ownership") or self.settings.default_party_ownership
        record["locale"] = record.get("locale") or self.settings.default_locale
        for key in ("email", "website"):
            if record.get(key):
                record[key] = record[key].lower()
        if record.get("phases") is not None:
            record["phases"] = list(dict.fromkeys(record["phases"]))
        return record

    def validate(self, record: dict, record_id: Optional[str] = None) -> List[Dict[str, str]]:
        errors = []
        allowed = {
            "type": self.settings.get_party_types_list(),
            "ownership": self.settings.get_party_ownerships_list(),
            "locale": self.settings.get_locales_list(),
        }
        for key, values in allowed.items():
            if record[key] not in values:
                errors.append(field_error(key, f"Must be one of {', '.join(values)}", "enum"))

        phases = self.settings.get_disaster_phases_list()
        unknown = [p for p in record.get("phases") or [] if p not in phases]
        if unknown:
            errors.append(field_error("phases", f"Unknown phases {', '.join(unknown)}; must be among {', '.join(phases)}", "enum"))

        phone = record.get("phone")
        if phone and not is_phone_number(phone, self.settings.phone_region):
            errors.append(field_error("phone", "Invalid mobile number", "phone"))

        parent = record.get("party")
        if parent and record_id and parent == record_id:
            errors.append(field_error("party", "A party can not be its own parent", "reference_error"))
        elif parent and record_id and self._is_descendant(parent, record_id):
            errors.append(field_error("party", "A party can not descend from itself", "reference_error"))
        elif parent:
            errors.extend(self.check_references("party", TABLE, [parent]))

        errors.extend(self.check_references("roles", ROLES_TABLE, record.get("roles") or []))
        return errors

    def populate(self, rows: List[dict]) -> List[dict]:
        """Expand roles (with their permissions) and a summary of the parent party"""
        role_ids = [rid for row in rows for rid in (row.get("roles") or [])]
        roles = RoleService(self.supabase, self.settings).find_many(role_ids) if role_ids else {}
        parents = self._summaries([row["party"] for row in rows if row.get("party")])

        for row in rows:
            if row.get("roles") is not None:
                row["roles"] = [roles[rid] for rid in row["roles"] if rid in roles]
            if "party" in row:
                row["party"] = parents.get(row["party"]) if row["party"] else None
        return rows

    def list_children(self, party_id: str, options: QueryOptions) -> ListResponse:
        """List parties whose parent is party_id"""
        if not is_uuid(party_id):
            raise NotFoundError()
        return self.list(options.with_filters(party=party_id))

    def _is_descendant(self, party_id: str, ancestor_id: str) -> bool:
        """Walk parent links up from party_id looking for ancestor_id"""
        seen = set()
        current = party_id
        while current and current not in seen:
            if current == ancestor_id:
                return True
            seen.add(current)
            result = self._execute(
                self.supabase.table(self.table).select("party").eq("id", current).limit(1)
            )
            current = result.data[0].get("party") if result.data else None
        return False

    def _select_clause(self, options: Optional[QueryOptions]) -> str:
        # longitude and latitude are derived from location
        clause = super()._select_clause(options)
        if clause == "*" or "location" in clause.split(","):
            return clause
        return f"{clause},location"

    def _summaries(self, ids: Sequence[str]) -> Dict[str, dict]:
        ids = list(dict.fromkeys(i for i in ids if is_uuid(i)))
        if not ids:
            return {}
        result = self._execute(
            self.supabase.table(self.table).select(",".join(SUMMARY_COLUMNS)).in_("id", ids)
        )
        return {row["id"]: row for row in result.data or []}
