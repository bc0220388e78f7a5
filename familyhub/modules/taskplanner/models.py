# Supabase table: goals (shared with the goals module)
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
The task planner keeps a simpler view of the goals table (see goals/models.py):

- text: the goal itself, also written to title (NOT NULL)
- progress: integer 0..100
- user_id: the creator; the planner only ever lists the caller's own rows
- group_id: NULL for personal goals

Columns the planner does not expose are filled on insert: owner_id is the
caller, type is 'Family' in a group and 'Personal' otherwise, timeframe is
'1 Year' and description is ''.
"""
