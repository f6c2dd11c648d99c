# Supabase table: permissions
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

permissions:
- id: uuid (primary key, default: gen_random_uuid())
- resource: text (not null) - classified resource name e.g. "Party", "Role"
- action: text (not null) - lower-cased action e.g. "create", "list"
- description: text (nullable) - defaults to "<resource> <action>"
- wildcard: text (not null, unique) - defaults to "<resource>:<action>"
- created_at: timestamptz (default: now())
- updated_at: timestamptz (default: now())
- unique constraint on (resource, action, wildcard)
"""

MODEL_NAME = "Permission"
TABLE = "permissions"
