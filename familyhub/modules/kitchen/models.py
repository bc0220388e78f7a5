# Supabase tables: kitchen_inventory, kitchen_grocery_lists, kitchen_grocery_items,
# kitchen_meal_plans, kitchen_meals, kitchen_meal_ingredients,
# kitchen_recipes, kitchen_recipe_ingredients
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

kitchen_inventory:
- id: uuid (primary key)
- group_id: uuid (foreign key to groups.id, not null)
- name: text (not null)
- category: text (not null) - one of INVENTORY_CATEGORIES in schemas.py
- location: text (not null) - e.g. Fridge, Freezer, Pantry, Counter
- quantity: numeric (not null)
- unit: text (not null)
- expiration_date: date (nullable)
- image_url: text (nullable)
- barcode: text (nullable)
- nutritional_info: jsonb (nullable)
- added_by: uuid (foreign key to users.id)
- added_date: timestamp (default: now())

kitchen_grocery_lists:
- id: uuid (primary key)
- group_id: uuid (foreign key to groups.id, not null)
- name: text (not null)
- description: text (nullable)
- created_by: uuid (foreign key to users.id)
- created_at: timestamp (default: now())

kitchen_grocery_items:
- id: uuid (primary key)
- list_id: uuid (foreign key to kitchen_grocery_lists.id, not null)
- group_id: uuid (copy of the list's group, used for access checks)
- name: text (not null)
- quantity: numeric (default: 1)
- unit: text (default: 'pieces')
- category: text (default: 'Other')
- estimated_cost: numeric (default: 0)
- notes: text (nullable)
- is_purchased: boolean (default: false)
- added_by: uuid (foreign key to users.id)
- created_at: timestamp (default: now())

kitchen_meal_plans:
- id: uuid (primary key)
- group_id: uuid (foreign key to groups.id, not null)
- name: text (not null)
- description: text (nullable)
- dietary_preferences: text[] (default: '{}')
- total_prep_time: integer (default: 0) - minutes
- total_cost: numeric (default: 0)
- servings: integer (default: 4)
- created_by: uuid (foreign key to users.id)
- created_date: timestamp (default: now())

kitchen_meals:
- id: uuid (primary key)
- meal_plan_id: uuid (foreign key to kitchen_meal_plans.id, on delete cascade)
- name: text (not null)
- type: text - breakfast, lunch, dinner, snack
- day_of_week: integer - 0 based
- prep_time: integer (default: 0)
- cook_time: integer (default: 0)

kitchen_meal_ingredients:
- id: uuid (primary key)
- meal_id: uuid (foreign key to kitchen_meals.id, on delete cascade)
- name: text (not null)
- quantity: numeric (nullable)
- unit: text (nullable)
- notes: text (nullable)

kitchen_recipes:
- id: uuid (primary key)
- group_id: uuid (foreign key to groups.id, not null)
- name: text (not null)
- description: text (nullable)
- instructions: jsonb (list of steps)
- prep_time: integer (default: 0)
- cook_time: integer (default: 0)
- servings: integer (default: 4)
- dietary_tags: text[] (default: '{}')
- image_url: text (nullable)
- nutritional_info: jsonb (nullable)
- source: text (default: 'User Created')
- is_public: boolean (default: false) - public recipes are listed for every group
- created_by: uuid (foreign key to users.id)
- created_at: timestamp (default: now())

kitchen_recipe_ingredients:
- id: uuid (primary key)
- recipe_id: uuid (foreign key to kitchen_recipes.id, on delete cascade)
- inventory_item_id: uuid (foreign key to kitchen_inventory.id, nullable)
- name: text (not null)
- quantity: numeric (nullable)
- unit: text (nullable)
- notes: text (nullable)
"""
