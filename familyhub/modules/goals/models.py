# Supabase table: goals
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

goals:
- id: uuid (primary key)
- group_id: uuid (foreign key to groups.id, nullable) - NULL only for personal task-planner goals
- owner_id: uuid (foreign key to users.id, not null)
- user_id: uuid (foreign key to users.id, nullable) - creator, set by the task planner
- title: text (not null)
- text: text (nullable, mirrors title for the task planner)
- description: text (default: '')
- type: text (not null) - e.g. personal, family, financial
- timeframe: text (not null) - e.g. weekly, monthly, yearly
- progress: integer (default: 0) - 0..100
- created_at: timestamp (default: now())
- updated_at: timestamp (nullable)

The goals module only lists rows of a group; personal rows belong to the
task planner (see taskplanner/).
"""
