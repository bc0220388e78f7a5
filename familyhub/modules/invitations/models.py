# Supabase table: group_invitations
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

group_invitations:
- id: uuid (primary key)
- group_id: uuid (foreign key to groups.id, not null)
- group_name: text (nullable, copied from groups.name at creation)
- invited_by_user_id: uuid (foreign key to users.id, not null)
- email: text (not null)
- full_name: text (not null)
- invite_token: text (not null, unique) - 64 hex characters
- short_code: text (not null, unique) - 8 characters, no 0/O/1/I
- status: text (not null, default: 'pending') - values: pending, accepted, expired
- expires_at: timestamp (not null)
- accepted_at: timestamp (nullable)
- created_at: timestamp (default: now())

Status only moves forward: pending -> accepted or pending -> expired.
Expiry is lazy; the first lookup after expires_at writes status = 'expired'.
"""
