# Supabase tables: tasks, projects
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

tasks:
- id: uuid (primary key)
- user_id: uuid (foreign key to users.id, not null) - creator
- group_id: uuid (foreign key to groups.id, nullable) - NULL means a personal task
- project_id: uuid (foreign key to projects.id, nullable)
- title: text (not null)
- text: text (nullable, mirrors title for older clients)
- description: text (nullable)
- type: text (not null, default: 'personal') - values: personal, work, group
- priority: integer (default: 2) - 1 high, 2 medium, 3 low, 0 unset
- completed: boolean (default: false)
- completed_at: timestamp (nullable, set only while completed)
- due_date: timestamp (nullable)
- created_at: timestamp (default: now())
- updated_at: timestamp (default: now())

projects:
- id: uuid (primary key)
- user_id: uuid (foreign key to users.id, not null)
- group_id: uuid (foreign key to groups.id, nullable) - NULL means a personal project
- name: text (not null)
- description: text (nullable)
- color: text (default: '#6366f1')
- created_at: timestamp (default: now())
- updated_at: timestamp (default: now())

The API speaks "category" and text priorities; storage keeps "type" and
integer priorities. See schemas.py for the mapping.
"""
