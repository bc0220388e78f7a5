from pydantic import Field, field_validator
from typing import Optional, List, Dict, Any, Union
from datetime import date, datetime
from familyhub.core.schemas import CamelModel, reject_null

INVENTORY_CATEGORIES = (
    "Produce",
    "Dairy",
    "Meat",
    "Seafood",
    "Bakery",
    "Pantry",
    "Beverages",
    "Snacks",
    "Frozen",
    "Condiments",
    "Spices",
    "Other",
)
DEFAULT_CATEGORY = "Other"
DEFAULT_LOCATION = "Counter"


def map_category(category: Optional[str]) -> str:
    """Fit a free-form category onto INVENTORY_CATEGORIES"""
    if not category:
        return DEFAULT_CATEGORY
    for known in INVENTORY_CATEGORIES:
        if known.lower() == category.strip().lower():
            return known
    return DEFAULT_CATEGORY


def _lenient_number(value: Any) -> Optional[float]:
    if value is None or isinstance(value, (int, float)):
        return value
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


# Inventory

class InventoryItemCreate(CamelModel):
    group_id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    category: str = Field(..., min_length=1)
    location: str = Field(..., min_length=1)
    quantity: float = Field(..., gt=0)
    unit: str = Field(..., min_length=1)
    expiration_date: Optional[date] = None
    image_url: Optional[str] = None


class InventoryItemUpdate(CamelModel):
    name: Optional[str] = Field(None, min_length=1)
    category: Optional[str] = Field(None, min_length=1)
    location: Optional[str] = Field(None, min_length=1)
    quantity: Optional[float] = Field(None, gt=0)
    unit: Optional[str] = Field(None, min_length=1)
    expiration_date: Optional[date] = None
    image_url: Optional[str] = None
    nutritional_info: Optional[Dict[str, Any]] = None
    barcode: Optional[str] = None

    @field_validator("name", "category", "location", "quantity", "unit")
    @classmethod
    def _required_columns(cls, value):
        return reject_null(value)


class DetectedItem(CamelModel):
    """One item reported by photo analysis; missing fields get inventory defaults"""
    name: str = Field(..., min_length=1)
    category: Optional[str] = None
    quantity: Optional[float] = Field(None, gt=0)
    unit: Optional[str] = None

    @field_validator("name")
    @classmethod
    def _name_not_blank(cls, value):
        if not value.strip():
            raise ValueError("must not be blank")
        return value.strip()

    def to_row(self, group_id: str, user_id: str) -> Dict[str, Any]:
        return {
            "name": self.name,
            "category": map_category(self.category),
            "location": DEFAULT_LOCATION,
            "quantity": self.quantity or 1,
            "unit": self.unit or "pieces",
            "added_by": user_id,
            "group_id": group_id,
        }


class InventoryItemResponse(CamelModel):
    id: str
    group_id: str
    name: str
    category: str
    location: Optional[str] = None
    quantity: Optional[float] = None
    unit: Optional[str] = None
    expiration_date: Optional[date] = None
    image_url: Optional[str] = None
    barcode: Optional[str] = None
    nutritional_info: Optional[Dict[str, Any]] = None
    added_by: Optional[str] = None
    added_date: Optional[datetime] = None


class PhotoInventoryRequest(CamelModel):
    group_id: str = Field(..., min_length=1)
    image_data: Union[str, List[str]]

    @field_validator("image_data")
    @classmethod
    def _not_empty(cls, value):
        if not value:
            raise ValueError("imageData is required")
        return value

    def images(self) -> List[str]:
        return [self.image_data] if isinstance(self.image_data, str) else list(self.image_data)


class PhotoInventoryResponse(CamelModel):
    items: List[InventoryItemResponse] = []
    suggestions: List[str] = []
    message: str


# Grocery lists

class GroceryListCreate(CamelModel):
    group_id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    description: Optional[str] = None


class GroceryItemCreate(CamelModel):
    name: str = Field(..., min_length=1)
    quantity: Optional[float] = Field(None, gt=0)
    unit: Optional[str] = None
    category: Optional[str] = None
    estimated_cost: Optional[float] = Field(None, ge=0)
    notes: Optional[str] = None


class GroceryItemUpdate(CamelModel):
    name: Optional[str] = Field(None, min_length=1)
    quantity: Optional[float] = Field(None, gt=0)
    unit: Optional[str] = Field(None, min_length=1)
    category: Optional[str] = Field(None, min_length=1)
    estimated_cost: Optional[float] = Field(None, ge=0)
    notes: Optional[str] = None
    is_purchased: Optional[bool] = None

    @field_validator("name", "quantity", "unit", "category", "estimated_cost", "is_purchased")
    @classmethod
    def _required_columns(cls, value):
        return reject_null(value)


class GroceryItemResponse(CamelModel):
    id: str
    list_id: str
    group_id: Optional[str] = None
    name: str
    quantity: Optional[float] = 1
    unit: Optional[str] = "pieces"
    category: Optional[str] = DEFAULT_CATEGORY
    estimated_cost: Optional[float] = 0
    notes: Optional[str] = None
    is_purchased: bool = False
    added_by: Optional[str] = None
    created_at: Optional[datetime] = None


class GroceryListResponse(CamelModel):
    id: str
    group_id: str
    name: str
    description: Optional[str] = None
    created_by: Optional[str] = None
    created_at: Optional[datetime] = None
    items: List[GroceryItemResponse] = []


# Meal plans

class IngredientFields(CamelModel):
    name: str = Field(..., min_length=1)
    quantity: Optional[float] = None
    unit: Optional[str] = None
    notes: Optional[str] = None

    @field_validator("quantity", mode="before")
    @classmethod
    def _lenient_quantity(cls, value):
        return _lenient_number(value)


class MealFields(CamelModel):
    name: str = Field(..., min_length=1)
    type: Optional[str] = None
    day_of_week: Optional[int] = None
    prep_time: Optional[int] = None
    cook_time: Optional[int] = None
    ingredients: List[IngredientFields] = []


class MealPlanFields(CamelModel):
    name: str = Field(..., min_length=1)
    description: Optional[str] = None
    dietary_preferences: List[str] = []
    total_prep_time: Optional[int] = None
    total_cost: Optional[float] = None
    servings: Optional[int] = None
    meals: List[MealFields] = []


class MealPlanCreate(MealPlanFields):
    group_id: str = Field(..., min_length=1)


class MealPlanGenerateRequest(CamelModel):
    group_id: str = Field(..., min_length=1)
    dietary_preferences: List[str] = []
    available_ingredients: List[str] = []
    excluded_ingredients: List[str] = []
    number_of_days: Optional[int] = Field(None, ge=1, le=31)
    servings: Optional[int] = Field(None, ge=1)
    budget: Optional[float] = None


class MealIngredientResponse(CamelModel):
    id: str
    meal_id: str
    name: str
    quantity: Optional[float] = None
    unit: Optional[str] = None
    notes: Optional[str] = None


class MealResponse(CamelModel):
    id: str
    meal_plan_id: str
    name: str
    type: Optional[str] = None
    day_of_week: Optional[int] = None
    prep_time: Optional[int] = 0
    cook_time: Optional[int] = 0
    ingredients: List[MealIngredientResponse] = []


class MealPlanResponse(CamelModel):
    id: str
    group_id: str
    name: str
    description: Optional[str] = None
    dietary_preferences: Optional[List[str]] = []
    total_prep_time: Optional[int] = 0
    total_cost: Optional[float] = 0
    servings: Optional[int] = 4
    created_by: Optional[str] = None
    created_date: Optional[datetime] = None
    meals: List[MealResponse] = []


# Recipes

class RecipeIngredientFields(IngredientFields):
    inventory_item_id: Optional[str] = None


class RecipeFields(CamelModel):
    name: str = Field(..., min_length=1)
    description: Optional[str] = None
    instructions: List[str] = []
    prep_time: Optional[int] = None
    cook_time: Optional[int] = None
    servings: Optional[int] = None
    dietary_tags: List[str] = []
    image_url: Optional[str] = None
    nutritional_info: Optional[Dict[str, Any]] = None
    source: Optional[str] = None
    ingredients: List[RecipeIngredientFields] = []


class RecipeCreate(RecipeFields):
    group_id: str = Field(..., min_length=1)
    is_public: bool = False


class RecipeGenerateRequest(CamelModel):
    group_id: str = Field(..., min_length=1)
    meal_idea: str = Field(..., min_length=1)
    ingredients: List[str] = []
    dietary_preferences: List[str] = []


class RecipeIngredientResponse(CamelModel):
    id: str
    recipe_id: str
    inventory_item_id: Optional[str] = None
    name: str
    quantity: Optional[float] = None
    unit: Optional[str] = None
    notes: Optional[str] = None


class RecipeResponse(CamelModel):
    id: str
    group_id: Optional[str] = None
    name: str
    description: Optional[str] = None
    instructions: Optional[List[str]] = []
    prep_time: Optional[int] = 0
    cook_time: Optional[int] = 0
    servings: Optional[int] = 4
    dietary_tags: Optional[List[str]] = []
    image_url: Optional[str] = None
    nutritional_info: Optional[Dict[str, Any]] = None
    source: Optional[str] = None
    is_public: bool = False
    created_by: Optional[str] = None
    created_at: Optional[datetime] = None
    ingredients: List[RecipeIngredientResponse] = []
