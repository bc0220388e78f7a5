# Supabase tables: plants, plant_photos
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

plants:
- id: uuid (primary key)
- group_id: uuid (foreign key to groups.id, not null)
- user_id: uuid (foreign key to users.id) - who added the plant
- name: text (not null)
- common_name: text (nullable)
- location: text (nullable)
- recommended_water_schedule: text (nullable) - e.g. "1/week", "When soil is dry"
- water_amount: text (nullable) - e.g. "1 cup"
- last_watered: timestamp (nullable)
- created_at: timestamp (default: now())
- updated_at: timestamp (default: now())

plant_photos:
- id: uuid (primary key)
- plant_id: uuid (foreign key to plants.id, not null, on delete cascade)
- image_url: text (not null) - usually a Cloudinary URL from /uploads
- photo_date: timestamp (not null) - when the photo was taken
- created_at: timestamp (default: now())
"""
