# Supabase tables: groups, group_members
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

groups:
- id: uuid (primary key)
- name: text (not null)
- description: text (nullable)
- avatar: text (nullable)
- privacy: text (not null, default: 'private') - values: public, private, invite-only
- created_by: uuid (foreign key to users.id, not null)
- enabled_modules: jsonb (nullable)
- created_at: timestamp (default: now())

group_members:
- id: uuid (primary key)
- group_id: uuid (foreign key to groups.id, not null)
- user_id: uuid (foreign key to users.id, not null)
- role: text (not null, default: 'Member') - values: Admin, Member
- is_active: boolean (not null, default: true)
- joined_at: timestamp (default: now())
- unique constraint on (user_id, group_id)

Memberships are deactivated (is_active = false), never deleted, so history
is preserved. Only active rows grant access.
"""
