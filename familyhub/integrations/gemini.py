"""
Gemini client for the AI-assisted kitchen, plant and notepad features.

Every call returns parsed JSON. Any provider or parsing problem surfaces as
ExternalServiceFailure; callers decide whether that is fatal (single
request) or skippable (one image in a batch).
"""

import google.generativeai as genai
from familyhub.config import settings
from familyhub.core.errors import ExternalServiceFailure, ServiceNotConfigured
from functools import lru_cache
from typing import Any, Dict, List, Optional
import base64
import binascii
import json
import logging
import re

logger = logging.getLogger(__name__)

DEFAULT_IMAGE_MIME = "image/jpeg"
_DATA_URI = re.compile(r"^data:(?P<mime>[\w/+.-]+);base64,(?P<data>.*)$", re.DOTALL)


def image_part(image: str) -> Dict[str, Any]:
    """Accept a data URI or bare base64 and build an inline image part."""
    mime_type = DEFAULT_IMAGE_MIME
    match = _DATA_URI.match(image.strip())
    if match:
        mime_type = match.group("mime")
        image = match.group("data")
    try:
        data = base64.b64decode(image, validate=False)
    except (binascii.Error, ValueError):
        raise ExternalServiceFailure("Image data is not valid base64")
    return {"mime_type": mime_type, "data": data}


def parse_json_from_text(text: Optional[str]) -> Any:
    """Pull the JSON document out of a model reply, fenced or not."""
    if not text:
        raise ExternalServiceFailure("AI service returned an empty response")
    text = text.strip()
    fenced = re.search(r"```(?:json)?\s*([\s\S]*?)```", text)
    if fenced:
        text = fenced.group(1).strip()
    try:
        return json.loads(text)
    except json.JSONDecodeError:
        start = min((i for i in (text.find("{"), text.find("[")) if i != -1), default=-1)
        end = max(text.rfind("}"), text.rfind("]"))
        if start != -1 and end > start:
            try:
                return json.loads(text[start:end + 1])
            except json.JSONDecodeError:
                pass
    raise ExternalServiceFailure("AI service returned an unreadable response")


class GeminiClient:
    def __init__(self, api_key: str, model_name: str):
        genai.configure(api_key=api_key)
        self.model = genai.GenerativeModel(model_name)
        self.model_name = model_name

    def generate_json(self, prompt: str, images: Optional[List[str]] = None) -> Any:
        content: List[Any] = [prompt]
        content.extend(image_part(image) for image in images or [])
        try:
            response = self.model.generate_content(content)
            text = response.text
        except Exception as e:
            logger.error(f"Gemini request to {self.model_name} failed: {e}")
            raise ExternalServiceFailure(f"AI service request failed: {e}")
        return parse_json_from_text(text)

    def analyze_inventory_photo(self, image: str) -> Dict[str, Any]:
        prompt = (
            "You are a kitchen inventory assistant. Identify every food item visible in this photo. "
            "Return ONLY JSON of the form "
            '{"items": [{"name": str, "category": str, "quantity": number, "unit": str}], '
            '"suggestions": [str]}. '
            "Use one of these categories: Produce, Dairy, Meat, Seafood, Bakery, Pantry, Beverages, "
            "Snacks, Frozen, Condiments, Spices, Other."
        )
        result = self.generate_json(prompt, [image])
        if not isinstance(result, dict):
            raise ExternalServiceFailure("AI service returned an unexpected photo analysis")
        return result

    def analyze_inventory(self, items: List[Dict[str, Any]]) -> Dict[str, Any]:
        listing = json.dumps([
            {k: item.get(k) for k in ("name", "category", "quantity", "unit", "expiration_date", "location")}
            for item in items
        ], default=str)
        prompt = (
            "Review this household kitchen inventory and return ONLY JSON of the form "
            '{"summary": str, "expiringSoon": [str], "lowStock": [str], "suggestions": [str], '
            '"mealIdeas": [str]}.\n'
            f"Inventory: {listing}"
        )
        result = self.generate_json(prompt)
        if not isinstance(result, dict):
            raise ExternalServiceFailure("AI service returned an unexpected inventory analysis")
        return result

    def generate_meal_plan(self, request: Dict[str, Any]) -> Dict[str, Any]:
        prompt = (
            f"Create a {request['number_of_days']}-day family meal plan for {request['servings']} servings. "
            f"Dietary preferences: {', '.join(request.get('dietary_preferences') or []) or 'none'}. "
            f"Ingredients on hand: {', '.join(request.get('available_ingredients') or []) or 'unknown'}. "
            f"Exclude: {', '.join(request.get('excluded_ingredients') or []) or 'nothing'}. "
            f"Budget: {request.get('budget') or 'no limit'}. "
            "Return ONLY JSON of the form "
            '{"name": str, "description": str, "dietaryPreferences": [str], "totalPrepTime": int, '
            '"totalCost": number, "servings": int, "meals": [{"name": str, '
            '"type": "breakfast"|"lunch"|"dinner"|"snack", "dayOfWeek": int, "prepTime": int, '
            '"cookTime": int, "ingredients": [{"name": str, "quantity": number, "unit": str, "notes": str}]}]}. '
            "dayOfWeek counts from 0."
        )
        result = self.generate_json(prompt)
        if not isinstance(result, dict):
            raise ExternalServiceFailure("AI service returned an unexpected meal plan")
        return result

    def generate_recipe(self, meal_idea: str, ingredients: List[str], dietary_preferences: List[str]) -> Dict[str, Any]:
        prompt = (
            f"Write a recipe for: {meal_idea}. "
            f"Prefer these ingredients: {', '.join(ingredients) or 'any'}. "
            f"Dietary preferences: {', '.join(dietary_preferences) or 'none'}. "
            "Return ONLY JSON of the form "
            '{"name": str, "description": str, "instructions": [str], "prepTime": int, "cookTime": int, '
            '"servings": int, "dietaryTags": [str], "nutritionalInfo": {"calories": number, '
            '"protein": number, "carbs": number, "fat": number}, '
            '"ingredients": [{"name": str, "quantity": number, "unit": str, "notes": str}]}.'
        )
        result = self.generate_json(prompt)
        if not isinstance(result, dict):
            raise ExternalServiceFailure("AI service returned an unexpected recipe")
        return result

    def extract_tasks(self, title: str, content: str) -> List[Any]:
        prompt = (
            "Extract the clear, actionable tasks from this note. Ignore ideas, general remarks and "
            "finished items. Return ONLY a JSON array (empty if there are none) of objects of the form "
            '{"title": str, "description": str, "date": "YYYY-MM-DD", "end_date": "YYYY-MM-DD", '
            '"time": "HH:MM", "end_time": "HH:MM", '
            '"type": "personal"|"group"|"finance"|"health"|"work"|"quick"|"shopping"|"other", '
            '"priority": "low"|"medium"|"high", "is_recurring": bool, '
            '"recurrence_pattern": "daily"|"weekly"|"monthly"|"yearly", "recurrence_interval": int}. '
            "Keep titles under 100 characters and include dates and times only when the note "
            "mentions them.\n"
            f"Note title: {title}\nNote content:\n{content}"
        )
        result = self.generate_json(prompt)
        if isinstance(result, dict):
            result = result.get("tasks")
        if not isinstance(result, list):
            raise ExternalServiceFailure("AI service returned an unexpected task list")
        return result

    def identify_plant(self, image: str) -> Dict[str, Any]:
        prompt = (
            "You are a plant identification expert. Identify the plant in this photo: its most common "
            "name, a simple watering schedule (e.g. \"1/week\", \"2/week\", \"When soil is dry\", \"Daily\") "
            "and the amount of water to use (e.g. \"1 cup\", \"Mist heavily\"). Return ONLY JSON of the form "
            '{"commonName": str, "recommendedWaterSchedule": str, "waterAmount": str, '
            '"confidence": "high"|"medium"|"low"}.'
        )
        result = self.generate_json(prompt, [image])
        if not isinstance(result, dict):
            raise ExternalServiceFailure("AI service returned an unexpected plant identification")
        return result


@lru_cache()
def _client(api_key: str, model_name: str) -> GeminiClient:
    return GeminiClient(api_key, model_name)


def get_gemini_client() -> GeminiClient:
    """FastAPI dependency; 503 when no API key is configured"""
    if not settings.gemini_api_key:
        raise ServiceNotConfigured("AI service is not configured")
    return _client(settings.gemini_api_key, settings.gemini_model)
