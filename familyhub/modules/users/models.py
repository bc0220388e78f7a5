# Supabase table: users
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py
# Authentication is handled by Supabase Auth (auth.users table)

"""
Expected Supabase table structure:

users:
- id: uuid (primary key, references auth.users.id)
- name: text (nullable)
- email: text (unique, not null)
- avatar: text (nullable) - image URL
- phone: text (nullable)
- default_view: text (nullable) - 'self' or a group id
- enabled_modules: jsonb (nullable) - module flags; null means defaults
- created_at: timestamp (default: now())

Older databases may not have enabled_modules yet; reads treat the missing
column (42703) exactly like a null value.
"""
