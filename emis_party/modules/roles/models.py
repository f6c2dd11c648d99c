# Supabase table: roles
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

roles:
- id: uuid (primary key, default: gen_random_uuid())
- type: text (not null) - one of ROLE_TYPES, default DEFAULT_ROLE_TYPE
- name: text (not null, unique) - e.g. "Ward Officer"
- description: text (nullable)
- permissions: uuid[] (nullable) - ids of permissions rows
- created_at: timestamptz (default: now())
- updated_at: timestamptz (default: now())

Permission ids are checked for existence on write; deleting a permission
does not cascade into roles.permissions.
"""

MODEL_NAME = "Role"
TABLE = "roles"
