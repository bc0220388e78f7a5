# Supabase table: timetracker_entries
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

timetracker_entries:
- id: uuid (primary key)
- user_id: uuid (foreign key to users.id, not null) - who logged the time
- group_id: uuid (foreign key to groups.id, nullable) - NULL means a personal entry
- project_id: uuid (foreign key to projects.id, nullable)
- start_time: timestamp (not null)
- end_time: timestamp (nullable) - NULL while the timer is running
- duration_minutes: integer (nullable) - whole minutes between start and end
- description: text (nullable)
- is_active: boolean (default: true) - false once deleted
- created_at: timestamp (default: now())
- updated_at: timestamp (default: now())

Projects are the same rows the todos module manages (see todos/models.py).
"""
