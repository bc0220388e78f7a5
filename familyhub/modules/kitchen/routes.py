from fastapi import APIRouter, Depends, Query
from familyhub.database.supabase_client import get_supabase
from familyhub.integrations.gemini import GeminiClient, get_gemini_client
from familyhub.modules.kitchen.schemas import (
    InventoryItemCreate, InventoryItemUpdate, InventoryItemResponse,
    PhotoInventoryRequest, PhotoInventoryResponse,
    GroceryListCreate, GroceryListResponse, GroceryItemCreate, GroceryItemUpdate, GroceryItemResponse,
    MealPlanCreate, MealPlanGenerateRequest, MealPlanResponse,
    RecipeCreate, RecipeGenerateRequest, RecipeResponse
)
from familyhub.modules.kitchen.service import (
    InventoryService, GroceryService, MealPlanService, RecipeService
)
from familyhub.core.access import AccessGateway
from familyhub.core.dependencies import get_current_user, get_access_gateway
from familyhub.core.errors import NotFound
from supabase import Client
from typing import Any, List, Dict, Optional

router = APIRouter(prefix="/kitchen", tags=["kitchen"])


def get_inventory_service(supabase: Client = Depends(get_supabase)) -> InventoryService:
    return InventoryService(supabase)


def get_grocery_service(supabase: Client = Depends(get_supabase)) -> GroceryService:
    return GroceryService(supabase)


def get_meal_plan_service(supabase: Client = Depends(get_supabase)) -> MealPlanService:
    return MealPlanService(supabase)


def get_recipe_service(supabase: Client = Depends(get_supabase)) -> RecipeService:
    return RecipeService(supabase)


# Inventory

@router.get("/inventory", response_model=List[InventoryItemResponse])
def list_inventory(
    group_id: Optional[str] = Query(None, alias="groupId"),
    current_user: Dict = Depends(get_current_user),
    gateway: AccessGateway = Depends(get_access_gateway),
    service: InventoryService = Depends(get_inventory_service)
):
    gateway.authorize_group_access(current_user, group_id)
    return service.list_items(group_id)


@router.post("/inventory", response_model=InventoryItemResponse, status_code=201)
def add_inventory_item(
    data: InventoryItemCreate,
    current_user: Dict = Depends(get_current_user),
    gateway: AccessGateway = Depends(get_access_gateway),
    service: InventoryService = Depends(get_inventory_service)
):
    gateway.authorize_group_access(current_user, data.group_id)
    return service.create_item(data, current_user["id"])


@router.post("/inventory/photo", response_model=PhotoInventoryResponse)
def add_inventory_from_photos(
    data: PhotoInventoryRequest,
    current_user: Dict = Depends(get_current_user),
    gateway: AccessGateway = Depends(get_access_gateway),
    service: InventoryService = Depends(get_inventory_service),
    gemini: GeminiClient = Depends(get_gemini_client)
):
    """Detect items in one or more photos and add them to the inventory"""
    gateway.authorize_group_access(current_user, data.group_id)
    return service.add_from_photos(data.group_id, data.images(), current_user["id"], gemini)


@router.get("/inventory/analyze", response_model=Dict[str, Any])
def analyze_inventory(
    group_id: Optional[str] = Query(None, alias="groupId"),
    current_user: Dict = Depends(get_current_user),
    gateway: AccessGateway = Depends(get_access_gateway),
    service: InventoryService = Depends(get_inventory_service),
    gemini: GeminiClient = Depends(get_gemini_client)
):
    gateway.authorize_group_access(current_user, group_id)
    return service.analyze(group_id, gemini)


@router.patch("/inventory/{item_id}", response_model=InventoryItemResponse)
def update_inventory_item(
    item_id: str,
    data: InventoryItemUpdate,
    current_user: Dict = Depends(get_current_user),
    gateway: AccessGateway = Depends(get_access_gateway),
    service: InventoryService = Depends(get_inventory_service)
):
    gateway.authorize_record(current_user, "kitchen_inventory", item_id, "Item")
    return service.update_item(item_id, data)


@router.delete("/inventory/{item_id}", status_code=204)
def delete_inventory_item(
    item_id: str,
    current_user: Dict = Depends(get_current_user),
    gateway: AccessGateway = Depends(get_access_gateway),
    service: InventoryService = Depends(get_inventory_service)
):
    gateway.authorize_record(current_user, "kitchen_inventory", item_id, "Item")
    service.delete_item(item_id)
    return None


# Grocery lists

@router.get("/grocery-lists", response_model=List[GroceryListResponse])
def list_grocery_lists(
    group_id: Optional[str] = Query(None, alias="groupId"),
    current_user: Dict = Depends(get_current_user),
    gateway: AccessGateway = Depends(get_access_gateway),
    service: GroceryService = Depends(get_grocery_service)
):
    gateway.authorize_group_access(current_user, group_id)
    return service.list_lists(group_id)


@router.post("/grocery-lists", response_model=GroceryListResponse, status_code=201)
def create_grocery_list(
    data: GroceryListCreate,
    current_user: Dict = Depends(get_current_user),
    gateway: AccessGateway = Depends(get_access_gateway),
    service: GroceryService = Depends(get_grocery_service)
):
    gateway.authorize_group_access(current_user, data.group_id)
    return service.create_list(data, current_user["id"])


@router.delete("/grocery-lists/{list_id}", status_code=204)
def delete_grocery_list(
    list_id: str,
    current_user: Dict = Depends(get_current_user),
    gateway: AccessGateway = Depends(get_access_gateway),
    service: GroceryService = Depends(get_grocery_service)
):
    """Delete a list together with its items"""
    gateway.authorize_record(current_user, "kitchen_grocery_lists", list_id, "List")
    service.delete_list(list_id)
    return None


@router.post("/grocery-lists/{list_id}/items", response_model=GroceryItemResponse, status_code=201)
def add_grocery_item(
    list_id: str,
    data: GroceryItemCreate,
    current_user: Dict = Depends(get_current_user),
    gateway: AccessGateway = Depends(get_access_gateway),
    service: GroceryService = Depends(get_grocery_service)
):
    grocery_list = gateway.authorize_record(current_user, "kitchen_grocery_lists", list_id, "List")
    return service.add_item(grocery_list, data, current_user["id"])


def _authorize_list_item(gateway: AccessGateway, identity: Dict, list_id: str, item_id: str) -> Dict:
    item = gateway.authorize_record(identity, "kitchen_grocery_items", item_id, "Item")
    if item.get("list_id") != list_id:
        raise NotFound("Item not found")
    return item


@router.patch("/grocery-lists/{list_id}/items/{item_id}", response_model=GroceryItemResponse)
def update_grocery_item(
    list_id: str,
    item_id: str,
    data: GroceryItemUpdate,
    current_user: Dict = Depends(get_current_user),
    gateway: AccessGateway = Depends(get_access_gateway),
    service: GroceryService = Depends(get_grocery_service)
):
    _authorize_list_item(gateway, current_user, list_id, item_id)
    return service.update_item(item_id, data)


@router.delete("/grocery-lists/{list_id}/items/{item_id}", status_code=204)
def delete_grocery_item(
    list_id: str,
    item_id: str,
    current_user: Dict = Depends(get_current_user),
    gateway: AccessGateway = Depends(get_access_gateway),
    service: GroceryService = Depends(get_grocery_service)
):
    _authorize_list_item(gateway, current_user, list_id, item_id)
    service.delete_item(item_id)
    return None


# Meal plans

@router.get("/meal-plans", response_model=List[MealPlanResponse])
def list_meal_plans(
    group_id: Optional[str] = Query(None, alias="groupId"),
    current_user: Dict = Depends(get_current_user),
    gateway: AccessGateway = Depends(get_access_gateway),
    service: MealPlanService = Depends(get_meal_plan_service)
):
    """Meal plans with their meals and ingredients"""
    gateway.authorize_group_access(current_user, group_id)
    return service.list_plans(group_id)


@router.post("/meal-plans", response_model=MealPlanResponse, status_code=201)
def create_meal_plan(
    data: MealPlanCreate,
    current_user: Dict = Depends(get_current_user),
    gateway: AccessGateway = Depends(get_access_gateway),
    service: MealPlanService = Depends(get_meal_plan_service)
):
    gateway.authorize_group_access(current_user, data.group_id)
    return service.create_plan(data.group_id, current_user["id"], data)


@router.post("/meal-plans/generate", response_model=MealPlanResponse, status_code=201)
def generate_meal_plan(
    data: MealPlanGenerateRequest,
    current_user: Dict = Depends(get_current_user),
    gateway: AccessGateway = Depends(get_access_gateway),
    service: MealPlanService = Depends(get_meal_plan_service),
    gemini: GeminiClient = Depends(get_gemini_client)
):
    gateway.authorize_group_access(current_user, data.group_id)
    return service.generate_plan(data, current_user["id"], gemini)


# Recipes

@router.get("/recipes", response_model=List[RecipeResponse])
def list_recipes(
    group_id: Optional[str] = Query(None, alias="groupId"),
    current_user: Dict = Depends(get_current_user),
    gateway: AccessGateway = Depends(get_access_gateway),
    service: RecipeService = Depends(get_recipe_service)
):
    gateway.authorize_group_access(current_user, group_id)
    return service.list_recipes(group_id)


@router.post("/recipes", response_model=RecipeResponse, status_code=201)
def create_recipe(
    data: RecipeCreate,
    current_user: Dict = Depends(get_current_user),
    gateway: AccessGateway = Depends(get_access_gateway),
    service: RecipeService = Depends(get_recipe_service)
):
    gateway.authorize_group_access(current_user, data.group_id)
    return service.add_recipe(data, current_user["id"])


@router.post("/recipes/generate", response_model=RecipeResponse, status_code=201)
def generate_recipe(
    data: RecipeGenerateRequest,
    current_user: Dict = Depends(get_current_user),
    gateway: AccessGateway = Depends(get_access_gateway),
    service: RecipeService = Depends(get_recipe_service),
    gemini: GeminiClient = Depends(get_gemini_client)
):
    """Ask the AI service for a recipe and save it to the group"""
    gateway.authorize_group_access(current_user, data.group_id)
    return service.generate_recipe(data, current_user["id"], gemini)
