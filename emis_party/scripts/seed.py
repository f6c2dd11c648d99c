"""
Seed Permissions, Roles and Parties Script
This script upserts the permission matrix from the config and, with --fake,
replaces every table's content with generated sample data.

    python -m emis_party.scripts.seed [--fake]
"""

import argparse
import logging
import math
import sys
from typing import Dict, List

from supabase import Client

from emis_party.config import Settings, settings
from emis_party.config.permissions_config import get_permission_matrix
from emis_party.core.query import QueryOptions
from emis_party.database.supabase_client import SupabaseClient
from emis_party.modules.parties.fakes import fake_party
from emis_party.modules.parties.models import TABLE as PARTIES_TABLE
from emis_party.modules.parties.schemas import PartyCreate
from emis_party.modules.parties.service import PartyService
from emis_party.modules.permissions.fakes import fake_permission
from emis_party.modules.permissions.models import TABLE as PERMISSIONS_TABLE
from emis_party.modules.permissions.schemas import PermissionCreate, PermissionUpdate
from emis_party.modules.permissions.service import PermissionService
from emis_party.modules.roles.fakes import fake_role
from emis_party.modules.roles.models import TABLE as ROLES_TABLE
from emis_party.modules.roles.schemas import RoleCreate, RoleUpdate
from emis_party.modules.roles.service import RoleService

logger = logging.getLogger(__name__)

# PostgREST refuses unfiltered deletes
NIL_UUID = "00000000-0000-0000-0000-000000000000"


def _find_one(service, **filters):
    page = service.list(QueryOptions(limit=1, filters=filters))
    return page.data[0] if page.data else None


def seed_permissions(supabase: Client, settings: Settings, matrix: dict) -> Dict[str, str]:
    """Upsert permissions from config; returns wildcard -> id"""
    logger.info("Seeding permissions...")
    service = PermissionService(supabase, settings)
    ids = {}
    created_count = 0
    updated_count = 0

    for perm in matrix["permissions"]:
        existing = _find_one(service, wildcard=perm["wildcard"])
        if existing:
            saved = service.patch(existing.id, PermissionUpdate(**perm))
            updated_count += 1
            logger.debug("Updated permission: %s", perm["wildcard"])
        else:
            saved = service.create(PermissionCreate(**perm))
            created_count += 1
            logger.debug("Created permission: %s", perm["wildcard"])
        ids[saved.wildcard] = saved.id

    logger.info("Permissions seeded: %d created, %d updated", created_count, updated_count)
    return ids


def seed_roles(supabase: Client, settings: Settings, matrix: dict, permission_ids: Dict[str, str]) -> int:
    """Upsert roles from config with their permission ids"""
    logger.info("Seeding roles...")
    service = RoleService(supabase, settings)
    created_count = 0
    updated_count = 0

    for role in matrix["roles"]:
        data = dict(role, permissions=[permission_ids[w] for w in role["permissions"] if w in permission_ids] or None)
        existing = _find_one(service, name=role["name"])
        if existing:
            service.patch(existing.id, RoleUpdate(**data))
            updated_count += 1
            logger.debug("Updated role: %s", role["name"])
        else:
            service.create(RoleCreate(**data))
            created_count += 1
            logger.debug("Created role: %s", role["name"])

    logger.info("Roles seeded: %d created, %d updated", created_count, updated_count)
    return created_count + updated_count


def clear(supabase: Client):
    for table in (PARTIES_TABLE, ROLES_TABLE, PERMISSIONS_TABLE):
        supabase.table(table).delete().neq("id", NIL_UUID).execute()
        logger.info("Cleared %s", table)


def seed_fakes(supabase: Client, settings: Settings, permissions: int = 5, roles: int = 10, parties: int = 20) -> List[str]:
    """Seed fake permissions, roles and parties; every other role and party gets references"""
    permission_service = PermissionService(supabase, settings)
    role_service = RoleService(supabase, settings)
    party_service = PartyService(supabase, settings)
    phases = settings.get_disaster_phases_list()

    permission_ids = [
        permission_service.create(PermissionCreate(**payload)).id
        for payload in fake_permission(permissions)
    ]
    logger.info("Seeded %d fake permissions", len(permission_ids))

    role_ids = []
    for index, payload in enumerate(fake_role(roles, settings)):
        taken = permission_ids[:math.ceil(index / 3)]
        if index % 2 == 0 and taken:
            payload["permissions"] = taken
        role_ids.append(role_service.create(RoleCreate(**payload)).id)
    logger.info("Seeded %d fake roles", len(role_ids))

    party_ids = []
    for index, payload in enumerate(fake_party(parties, settings)):
        if index % 2 == 0:
            payload["roles"] = role_ids[:math.ceil(index / 3)] or None
            payload["phases"] = phases[:math.ceil(index / 8)] or None
        party_ids.append(party_service.create(PartyCreate(**payload)).id)
    logger.info("Seeded %d fake parties", len(party_ids))
    return party_ids


def main(argv=None):
    """Main function to seed permissions, roles and (optionally) fake data"""
    parser = argparse.ArgumentParser(description="Seed permissions, roles and parties")
    parser.add_argument("--fake", action="store_true", help="clear tables and seed fake data")
    args = parser.parse_args(argv)

    logging.basicConfig(level=getattr(logging, settings.log_level.upper(), logging.INFO))

    try:
        supabase = SupabaseClient.get_service_client()
        logger.info("Starting seeding...")

        if args.fake:
            clear(supabase)
            seed_fakes(supabase, settings)

        role_types = settings.get_role_types_list()
        matrix = get_permission_matrix("System" if "System" in role_types else settings.default_role_type)
        permission_ids = seed_permissions(supabase, settings, matrix)
        role_count = seed_roles(supabase, settings, matrix, permission_ids)

        logger.info("Seeding completed successfully!")
        logger.info("Total: %d permissions, %d roles processed", len(permission_ids), role_count)

    except Exception as e:
        logger.error("Error during seeding: %s", e)
        sys.exit(1)


if __name__ == "__main__":
    main()
