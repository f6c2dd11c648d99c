import re

import inflection

from emis_party.core.crud import CrudService
from emis_party.modules.permissions.models import MODEL_NAME, TABLE
from emis_party.modules.permissions.schemas import PermissionResponse


def classify(resource: str) -> str:
    """Singular CamelCase form of a resource name e.g. "parties" -> "Party"."""
    name = re.sub(r"[\s\-]+", "_", resource.strip())
    return inflection.camelize(inflection.singularize(inflection.underscore(name)))


class PermissionService(CrudService):
    table = TABLE
    model_name = MODEL_NAME
    response_model = PermissionResponse
    columns = ("id", "resource", "action", "description", "wildcard", "created_at", "updated_at")
    required = ("resource", "action")
    searchable = ("resource", "action", "description", "wildcard")
    unique_fields = ("resource", "action", "wildcard")

    def prepare(self, record: dict) -> dict:
        """Classify resource, lower-case action, derive description and wildcard"""
        resource = (record.get("resource") or "").strip()
        action = (record.get("action") or "").strip()
        if resource:
            record["resource"] = resource = classify(resource)
        if action:
            record["action"] = action = action.lower()
        if not record.get("description"):
            record["description"] = " ".join([resource, action]).strip()
        if not record.get("wildcard"):
            record["wildcard"] = ":".join([resource, action])
        return record
