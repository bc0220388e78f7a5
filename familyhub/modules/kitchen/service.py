from postgrest.exceptions import APIError
from pydantic import ValidationError
from supabase import Client
from familyhub.integrations.gemini import GeminiClient
from familyhub.modules.kitchen.schemas import (
    InventoryItemCreate, InventoryItemUpdate, InventoryItemResponse, PhotoInventoryResponse,
    GroceryListCreate, GroceryListResponse, GroceryItemCreate, GroceryItemUpdate, GroceryItemResponse,
    MealPlanFields, MealPlanGenerateRequest, MealPlanResponse,
    RecipeFields, RecipeCreate, RecipeGenerateRequest, RecipeResponse,
    DetectedItem, DEFAULT_CATEGORY
)
from familyhub.core.compensation import InsertLog
from familyhub.core.errors import NotFound, ExternalServiceFailure, storage_failure
from typing import Any, Dict, List, Optional
import logging

logger = logging.getLogger(__name__)

NO_ITEMS_MESSAGE = "No items detected in the photos"
DEFAULT_PHOTO_SUGGESTION = "Try taking clearer photos with better lighting"
DEFAULT_PLAN_DAYS = 7
DEFAULT_SERVINGS = 4


def _group_children(rows: List[Dict[str, Any]], key: str) -> Dict[str, List[Dict[str, Any]]]:
    grouped: Dict[str, List[Dict[str, Any]]] = {}
    for row in rows:
        grouped.setdefault(row[key], []).append(row)
    return grouped


class InventoryService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def list_items(self, group_id: str) -> List[Dict[str, Any]]:
        try:
            result = self.supabase.table("kitchen_inventory")\
                .select("*")\
                .eq("group_id", group_id)\
                .order("added_date", desc=True)\
                .execute()
        except APIError as e:
            raise storage_failure(e, f"Failed to list inventory for {group_id}")
        return result.data or []

    def create_item(self, data: InventoryItemCreate, user_id: str) -> InventoryItemResponse:
        row = data.to_row()
        if row.get("expiration_date"):
            row["expiration_date"] = row["expiration_date"].isoformat()
        row["added_by"] = user_id
        try:
            result = self.supabase.table("kitchen_inventory").insert(row).execute()
        except APIError as e:
            raise storage_failure(e, f"Failed to add inventory item in {data.group_id}")
        return InventoryItemResponse(**result.data[0])

    def update_item(self, item_id: str, data: InventoryItemUpdate) -> InventoryItemResponse:
        updates = data.to_row()
        if updates.get("expiration_date"):
            updates["expiration_date"] = updates["expiration_date"].isoformat()
        try:
            result = self.supabase.table("kitchen_inventory")\
                .update(updates)\
                .eq("id", item_id)\
                .execute()
        except APIError as e:
            raise storage_failure(e, f"Failed to update inventory item {item_id}")
        if not result.data:
            raise NotFound("Item not found")
        return InventoryItemResponse(**result.data[0])

    def delete_item(self, item_id: str) -> None:
        try:
            self.supabase.table("kitchen_inventory").delete().eq("id", item_id).execute()
        except APIError as e:
            raise storage_failure(e, f"Failed to delete inventory item {item_id}")

    def add_from_photos(
        self, group_id: str, images: List[str], user_id: str, gemini: GeminiClient
    ) -> PhotoInventoryResponse:
        """
        Detect items in each photo and add them to the group's inventory.

        Photos are analysed independently. A photo the AI service cannot
        handle is logged and skipped, so one bad image never discards the
        items found in the others. Items are validated one by one the same
        way: a malformed item is dropped and the rest are stored.
        """
        detected: List[DetectedItem] = []
        suggestions: List[str] = []
        for index, image in enumerate(images, start=1):
            try:
                analysis = gemini.analyze_inventory_photo(image)
            except ExternalServiceFailure as e:
                logger.warning(f"Skipping photo {index}/{len(images)} for group {group_id}: {e.detail}")
                continue
            for raw in analysis.get("items") or []:
                try:
                    detected.append(DetectedItem.model_validate(raw))
                except ValidationError as e:
                    logger.warning(
                        f"Skipping malformed item from photo {index} for group {group_id}: "
                        f"{raw!r} ({e.error_count()} errors)"
                    )
            suggestions.extend(str(s) for s in analysis.get("suggestions") or [])

        if not detected:
            return PhotoInventoryResponse(
                message=NO_ITEMS_MESSAGE,
                suggestions=suggestions or [DEFAULT_PHOTO_SUGGESTION],
            )

        rows = [item.to_row(group_id, user_id) for item in detected]
        try:
            result = self.supabase.table("kitchen_inventory").insert(rows).execute()
        except APIError as e:
            raise storage_failure(e, f"Failed to add detected items to {group_id}")

        added = [InventoryItemResponse(**row) for row in result.data or []]
        plural = "s" if len(images) != 1 else ""
        logger.info(f"Added {len(added)} items from {len(images)} photo(s) to group {group_id}")
        return PhotoInventoryResponse(
            items=added,
            suggestions=suggestions,
            message=f"Analyzed {len(images)} photo{plural} and added {len(added)} items to inventory",
        )

    def analyze(self, group_id: str, gemini: GeminiClient) -> Any:
        return gemini.analyze_inventory(self.list_items(group_id))


class GroceryService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def list_lists(self, group_id: str) -> List[GroceryListResponse]:
        try:
            lists = self.supabase.table("kitchen_grocery_lists")\
                .select("*")\
                .eq("group_id", group_id)\
                .order("created_at", desc=True)\
                .execute().data or []
            items = []
            if lists:
                items = self.supabase.table("kitchen_grocery_items")\
                    .select("*")\
                    .in_("list_id", [gl["id"] for gl in lists])\
                    .order("created_at")\
                    .execute().data or []
        except APIError as e:
            raise storage_failure(e, f"Failed to list grocery lists for {group_id}")

        by_list = _group_children(items, "list_id")
        return [GroceryListResponse(**gl, items=by_list.get(gl["id"], [])) for gl in lists]

    def create_list(self, data: GroceryListCreate, user_id: str) -> GroceryListResponse:
        try:
            result = self.supabase.table("kitchen_grocery_lists").insert({
                "name": data.name,
                "description": data.description,
                "created_by": user_id,
                "group_id": data.group_id,
            }).execute()
        except APIError as e:
            raise storage_failure(e, f"Failed to create grocery list in {data.group_id}")
        return GroceryListResponse(**result.data[0])

    def delete_list(self, list_id: str) -> None:
        try:
            self.supabase.table("kitchen_grocery_items").delete().eq("list_id", list_id).execute()
            self.supabase.table("kitchen_grocery_lists").delete().eq("id", list_id).execute()
        except APIError as e:
            raise storage_failure(e, f"Failed to delete grocery list {list_id}")

    def add_item(self, grocery_list: Dict[str, Any], data: GroceryItemCreate, user_id: str) -> GroceryItemResponse:
        row = {
            "list_id": grocery_list["id"],
            "group_id": grocery_list["group_id"],
            "name": data.name,
            "quantity": data.quantity or 1,
            "unit": data.unit or "pieces",
            "category": data.category or DEFAULT_CATEGORY,
            "estimated_cost": data.estimated_cost or 0,
            "notes": data.notes,
            "added_by": user_id,
        }
        try:
            result = self.supabase.table("kitchen_grocery_items").insert(row).execute()
        except APIError as e:
            raise storage_failure(e, f"Failed to add item to list {grocery_list['id']}")
        return GroceryItemResponse(**result.data[0])

    def update_item(self, item_id: str, data: GroceryItemUpdate) -> GroceryItemResponse:
        try:
            result = self.supabase.table("kitchen_grocery_items")\
                .update(data.to_row())\
                .eq("id", item_id)\
                .execute()
        except APIError as e:
            raise storage_failure(e, f"Failed to update grocery item {item_id}")
        if not result.data:
            raise NotFound("Item not found")
        return GroceryItemResponse(**result.data[0])

    def delete_item(self, item_id: str) -> None:
        try:
            self.supabase.table("kitchen_grocery_items").delete().eq("id", item_id).execute()
        except APIError as e:
            raise storage_failure(e, f"Failed to delete grocery item {item_id}")


class MealPlanService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def list_plans(self, group_id: str) -> List[MealPlanResponse]:
        try:
            plans = self.supabase.table("kitchen_meal_plans")\
                .select("*")\
                .eq("group_id", group_id)\
                .order("created_date", desc=True)\
                .execute().data or []
            meals, ingredients = [], []
            if plans:
                meals = self.supabase.table("kitchen_meals")\
                    .select("*")\
                    .in_("meal_plan_id", [p["id"] for p in plans])\
                    .order("day_of_week")\
                    .execute().data or []
            if meals:
                ingredients = self.supabase.table("kitchen_meal_ingredients")\
                    .select("*")\
                    .in_("meal_id", [m["id"] for m in meals])\
                    .execute().data or []
        except APIError as e:
            raise storage_failure(e, f"Failed to list meal plans for {group_id}")

        by_meal = _group_children(ingredients, "meal_id")
        by_plan = _group_children(
            [{**m, "ingredients": by_meal.get(m["id"], [])} for m in meals], "meal_plan_id"
        )
        return [MealPlanResponse(**p, meals=by_plan.get(p["id"], [])) for p in plans]

    def create_plan(self, group_id: str, user_id: str, plan: MealPlanFields) -> MealPlanResponse:
        """Insert plan, meals, then ingredients; undo everything if any step fails"""
        log = InsertLog(self.supabase)
        try:
            plan_row = log.insert("kitchen_meal_plans", {
                "name": plan.name,
                "description": plan.description,
                "dietary_preferences": plan.dietary_preferences,
                "total_prep_time": plan.total_prep_time or 0,
                "total_cost": plan.total_cost or 0,
                "servings": plan.servings or DEFAULT_SERVINGS,
                "created_by": user_id,
                "group_id": group_id,
            })[0]
            meals = []
            for meal in plan.meals:
                meal_row = log.insert("kitchen_meals", {
                    "meal_plan_id": plan_row["id"],
                    "name": meal.name,
                    "type": meal.type,
                    "day_of_week": meal.day_of_week,
                    "prep_time": meal.prep_time or 0,
                    "cook_time": meal.cook_time or 0,
                })[0]
                ingredient_rows = []
                if meal.ingredients:
                    ingredient_rows = log.insert("kitchen_meal_ingredients", [
                        {"meal_id": meal_row["id"], **ingredient.model_dump()}
                        for ingredient in meal.ingredients
                    ])
                meals.append({**meal_row, "ingredients": ingredient_rows})
        except APIError as e:
            log.rollback()
            raise storage_failure(e, f"Failed to save meal plan for {group_id}")

        logger.info(f"Meal plan {plan_row['id']} with {len(meals)} meals saved for {group_id}")
        return MealPlanResponse(**plan_row, meals=meals)

    def generate_plan(self, request: MealPlanGenerateRequest, user_id: str, gemini: GeminiClient) -> MealPlanResponse:
        days = request.number_of_days or DEFAULT_PLAN_DAYS
        servings = request.servings or DEFAULT_SERVINGS
        draft = gemini.generate_meal_plan({
            "dietary_preferences": request.dietary_preferences,
            "available_ingredients": request.available_ingredients,
            "excluded_ingredients": request.excluded_ingredients,
            "number_of_days": days,
            "servings": servings,
            "budget": request.budget,
        })
        draft.setdefault("name", f"{days}-Day Meal Plan")
        draft.setdefault("servings", servings)
        try:
            plan = MealPlanFields.model_validate(draft)
        except ValidationError as e:
            logger.error(f"Unusable meal plan from AI service: {e}")
            raise ExternalServiceFailure("Failed to generate meal plan")
        return self.create_plan(request.group_id, user_id, plan)


class RecipeService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def list_recipes(self, group_id: str) -> List[RecipeResponse]:
        """The group's own recipes plus every public recipe"""
        try:
            recipes = self.supabase.table("kitchen_recipes")\
                .select("*")\
                .or_(f"group_id.eq.{group_id},is_public.eq.true")\
                .order("created_at", desc=True)\
                .execute().data or []
            ingredients = []
            if recipes:
                ingredients = self.supabase.table("kitchen_recipe_ingredients")\
                    .select("*")\
                    .in_("recipe_id", [r["id"] for r in recipes])\
                    .execute().data or []
        except APIError as e:
            raise storage_failure(e, f"Failed to list recipes for {group_id}")

        by_recipe = _group_children(ingredients, "recipe_id")
        return [RecipeResponse(**r, ingredients=by_recipe.get(r["id"], [])) for r in recipes]

    def create_recipe(
        self, group_id: str, user_id: str, recipe: RecipeFields,
        is_public: bool = False, source: Optional[str] = None
    ) -> RecipeResponse:
        log = InsertLog(self.supabase)
        try:
            recipe_row = log.insert("kitchen_recipes", {
                "name": recipe.name,
                "description": recipe.description,
                "instructions": recipe.instructions,
                "prep_time": recipe.prep_time or 0,
                "cook_time": recipe.cook_time or 0,
                "servings": recipe.servings or DEFAULT_SERVINGS,
                "dietary_tags": recipe.dietary_tags,
                "image_url": recipe.image_url,
                "nutritional_info": recipe.nutritional_info,
                "source": recipe.source or source or "User Created",
                "created_by": user_id,
                "group_id": group_id,
                "is_public": is_public,
            })[0]
            ingredient_rows = []
            if recipe.ingredients:
                ingredient_rows = log.insert("kitchen_recipe_ingredients", [
                    {"recipe_id": recipe_row["id"], **ingredient.model_dump()}
                    for ingredient in recipe.ingredients
                ])
        except APIError as e:
            log.rollback()
            raise storage_failure(e, f"Failed to save recipe for {group_id}")
        return RecipeResponse(**recipe_row, ingredients=ingredient_rows)

    def add_recipe(self, data: RecipeCreate, user_id: str) -> RecipeResponse:
        return self.create_recipe(data.group_id, user_id, data, is_public=data.is_public)

    def generate_recipe(self, request: RecipeGenerateRequest, user_id: str, gemini: GeminiClient) -> RecipeResponse:
        draft = gemini.generate_recipe(request.meal_idea, request.ingredients, request.dietary_preferences)
        draft.setdefault("name", request.meal_idea)
        try:
            recipe = RecipeFields.model_validate(draft)
        except ValidationError as e:
            logger.error(f"Unusable recipe from AI service: {e}")
            raise ExternalServiceFailure("Failed to generate recipe")
        return self.create_recipe(request.group_id, user_id, recipe, source="AI Generated")
