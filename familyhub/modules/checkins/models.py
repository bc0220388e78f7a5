# Supabase tables: check_ins, questions
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

check_ins:
- id: uuid (primary key)
- group_id: uuid (foreign key to groups.id, not null)
- member_id: uuid (foreign key to users.id, not null)
- mood: text (not null)
- note: text (not null)
- location: text (nullable)
- question_id: uuid (foreign key to questions.id, nullable)
- timestamp: timestamp (default: now())

questions:
- id: uuid (primary key)
- group_id: uuid (foreign key to groups.id, not null)
- text: text (not null)
- topic: text (not null)
- created_by: uuid (foreign key to users.id)
- is_active: boolean (default: true)
- timestamp: timestamp (default: now())
"""
