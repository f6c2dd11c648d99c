# Supabase table: parties
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

parties:
- id: uuid (primary key, default: gen_random_uuid())
- party: uuid (nullable) - parent party id, forms a tree
- type: text (not null) - one of PARTY_TYPES, default DEFAULT_PARTY_TYPE
- ownership: text (not null) - one of PARTY_OWNERSHIPS, default DEFAULT_PARTY_OWNERSHIP
- phases: text[] (nullable) - subset of DISASTER_PHASES
- name: text (not null) - e.g. "Kinondoni Municipal Council"
- avatar: text (nullable) - image url
- phone: text (not null) - mobile number
- landline: text (nullable)
- fax: text (nullable)
- email: text (not null) - lower-cased
- website: text (nullable) - lower-cased
- about: text (nullable)
- physical_address: text (nullable)
- postal_address: text (nullable)
- locale: text (not null) - one of LOCALES, default DEFAULT_LOCALE
- location: jsonb (nullable) - GeoJSON point {"type": "Point", "coordinates": [lng, lat]}
- roles: uuid[] (nullable) - ids of roles rows
- created_at: timestamptz (default: now())
- updated_at: timestamptz (default: now())
- unique constraint on (type, name, phone, email)

Parent and role ids are checked for existence on write; deletes do not
cascade.
"""

MODEL_NAME = "Party"
TABLE = "parties"
