# Supabase tables: notepad_folders, notepad_notes
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

notepad_folders:
- id: uuid (primary key)
- user_id: uuid (foreign key to users.id, not null) - creator
- group_id: uuid (foreign key to groups.id, nullable) - NULL means a personal folder
- name: text (not null)
- created_at: timestamp (default: now())
- updated_at: timestamp (default: now())

notepad_notes:
- id: uuid (primary key)
- user_id: uuid (foreign key to users.id, not null) - creator
- group_id: uuid (foreign key to groups.id, nullable) - NULL means a personal note
- folder_id: uuid (foreign key to notepad_folders.id, nullable, on delete set null)
- title: text (not null)
- content: text (not null, default: '')
- created_at: timestamp (default: now())
- updated_at: timestamp (default: now())

A note and its folder always share the same scope: both personal (and owned
by the same user) or both in the same group.
"""
