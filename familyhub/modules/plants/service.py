from fastapi import status
from postgrest.exceptions import APIError
from supabase import Client
from pydantic import ValidationError
from familyhub.integrations.gemini import GeminiClient
from familyhub.modules.plants.schemas import (
    PlantCreate, PlantUpdate, PlantResponse, PlantIdentification, PlantPhotoCreate, PlantPhotoResponse
)
from familyhub.core.errors import (
    NotFound, ValidationFailed, ExternalServiceFailure, StorageFailure, storage_failure, is_missing_relation
)
from familyhub.core.schemas import utc_now
from typing import List
import logging

logger = logging.getLogger(__name__)

MISSING_PHOTOS_TABLE = "Plant photos table does not exist. Please run the plants migration."


class PlantService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def list_plants(self, group_id: str) -> List[PlantResponse]:
        try:
            result = self.supabase.table("plants")\
                .select("*")\
                .eq("group_id", group_id)\
                .order("created_at", desc=True)\
                .execute()
        except APIError as e:
            raise storage_failure(e, f"Failed to list plants for {group_id}")
        return [PlantResponse(**row) for row in result.data or []]

    def create_plant(self, data: PlantCreate, user_id: str) -> PlantResponse:
        now = utc_now().isoformat()
        row = {
            "group_id": data.group_id,
            "user_id": user_id,
            "name": data.name,
            "common_name": data.common_name or None,
            "location": data.location or None,
            "recommended_water_schedule": data.recommended_water_schedule or None,
            "water_amount": data.water_amount or None,
            "last_watered": data.last_watered.isoformat() if data.last_watered else None,
            "created_at": now,
            "updated_at": now,
        }
        try:
            result = self.supabase.table("plants").insert(row).execute()
        except APIError as e:
            raise storage_failure(e, f"Failed to create plant in {data.group_id}")
        return PlantResponse(**result.data[0])

    def _update(self, plant_id: str, updates: dict) -> PlantResponse:
        updates["updated_at"] = utc_now().isoformat()
        try:
            result = self.supabase.table("plants")\
                .update(updates)\
                .eq("id", plant_id)\
                .execute()
        except APIError as e:
            raise storage_failure(e, f"Failed to update plant {plant_id}")
        if not result.data:
            raise NotFound("Plant not found")
        return PlantResponse(**result.data[0])

    def update_plant(self, plant_id: str, data: PlantUpdate) -> PlantResponse:
        updates = data.to_row()
        if "last_watered" in updates and updates["last_watered"] is not None:
            updates["last_watered"] = updates["last_watered"].isoformat()
        return self._update(plant_id, updates)

    def water_plant(self, plant_id: str) -> PlantResponse:
        return self._update(plant_id, {"last_watered": utc_now().isoformat()})

    def delete_plant(self, plant_id: str) -> None:
        try:
            self.supabase.table("plants").delete().eq("id", plant_id).execute()
        except APIError as e:
            raise storage_failure(e, f"Failed to delete plant {plant_id}")

    # Photos

    def list_photos(self, plant_id: str) -> List[PlantPhotoResponse]:
        try:
            result = self.supabase.table("plant_photos")\
                .select("*")\
                .eq("plant_id", plant_id)\
                .order("photo_date", desc=True)\
                .execute()
        except APIError as e:
            raise self._photo_failure(e, f"Failed to list photos of plant {plant_id}")
        return [PlantPhotoResponse(**row) for row in result.data or []]

    def add_photo(self, plant_id: str, data: PlantPhotoCreate) -> PlantPhotoResponse:
        row = {
            "plant_id": plant_id,
            "image_url": data.image_url,
            "photo_date": (data.photo_date or utc_now()).isoformat(),
        }
        try:
            result = self.supabase.table("plant_photos").insert(row).execute()
        except APIError as e:
            raise self._photo_failure(e, f"Failed to add photo to plant {plant_id}")
        return PlantPhotoResponse(**result.data[0])

    def delete_photo(self, plant_id: str, photo_id: str) -> None:
        """Only a photo of plant_id may be deleted through that plant"""
        try:
            result = self.supabase.table("plant_photos")\
                .select("*")\
                .eq("id", photo_id)\
                .limit(1)\
                .execute()
            if not result.data or result.data[0].get("plant_id") != plant_id:
                raise NotFound("Photo not found")
            self.supabase.table("plant_photos").delete().eq("id", photo_id).execute()
        except APIError as e:
            raise self._photo_failure(e, f"Failed to delete photo {photo_id}")

    @staticmethod
    def _photo_failure(e: APIError, context: str) -> StorageFailure:
        if is_missing_relation(e):
            logger.error(f"{context}: plant_photos table missing")
            return StorageFailure(MISSING_PHOTOS_TABLE, status_code=status.HTTP_503_SERVICE_UNAVAILABLE)
        return storage_failure(e, context)

    @staticmethod
    def identify(gemini: GeminiClient, image_base64: str) -> PlantIdentification:
        if not image_base64.startswith("data:image/"):
            raise ValidationFailed("Invalid image format. Expected base64 data URI.")
        result = gemini.identify_plant(image_base64)
        try:
            return PlantIdentification(**result)
        except ValidationError as e:
            logger.error(f"Unusable plant identification: {e}")
            raise ExternalServiceFailure("Failed to identify plant from image")
