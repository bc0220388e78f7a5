from fastapi import APIRouter, Depends, Query
from familyhub.database.supabase_client import get_supabase
from familyhub.integrations.gemini import GeminiClient, get_gemini_client
from familyhub.modules.plants.schemas import (
    PlantCreate, PlantUpdate, PlantResponse, PlantIdentifyRequest, PlantIdentification,
    PlantPhotoCreate, PlantPhotoResponse
)
from familyhub.modules.plants.service import PlantService
from familyhub.core.access import AccessGateway
from familyhub.core.dependencies import get_current_user, get_access_gateway
from supabase import Client
from typing import List, Dict, Optional

router = APIRouter(prefix="/plants", tags=["plants"])


def get_plant_service(supabase: Client = Depends(get_supabase)) -> PlantService:
    return PlantService(supabase)


@router.get("", response_model=List[PlantResponse])
def list_plants(
    group_id: Optional[str] = Query(None, alias="groupId"),
    current_user: Dict = Depends(get_current_user),
    gateway: AccessGateway = Depends(get_access_gateway),
    service: PlantService = Depends(get_plant_service)
):
    gateway.authorize_group_access(current_user, group_id)
    return service.list_plants(group_id)


@router.post("", response_model=PlantResponse, status_code=201)
def create_plant(
    data: PlantCreate,
    current_user: Dict = Depends(get_current_user),
    gateway: AccessGateway = Depends(get_access_gateway),
    service: PlantService = Depends(get_plant_service)
):
    gateway.authorize_group_access(current_user, data.group_id)
    return service.create_plant(data, current_user["id"])


@router.post("/identify", response_model=PlantIdentification)
def identify_plant(
    data: PlantIdentifyRequest,
    current_user: Dict = Depends(get_current_user),
    gemini: GeminiClient = Depends(get_gemini_client)
):
    """Identify a plant from a base64 image data URI"""
    return PlantService.identify(gemini, data.image_base64)


@router.get("/{plant_id}", response_model=PlantResponse)
def get_plant(
    plant_id: str,
    current_user: Dict = Depends(get_current_user),
    gateway: AccessGateway = Depends(get_access_gateway)
):
    return gateway.authorize_record(current_user, "plants", plant_id, "Plant")


@router.patch("/{plant_id}", response_model=PlantResponse)
def update_plant(
    plant_id: str,
    data: PlantUpdate,
    current_user: Dict = Depends(get_current_user),
    gateway: AccessGateway = Depends(get_access_gateway),
    service: PlantService = Depends(get_plant_service)
):
    gateway.authorize_record(current_user, "plants", plant_id, "Plant")
    return service.update_plant(plant_id, data)


@router.post("/{plant_id}/water", response_model=PlantResponse)
def water_plant(
    plant_id: str,
    current_user: Dict = Depends(get_current_user),
    gateway: AccessGateway = Depends(get_access_gateway),
    service: PlantService = Depends(get_plant_service)
):
    """Record a watering now"""
    gateway.authorize_record(current_user, "plants", plant_id, "Plant")
    return service.water_plant(plant_id)


@router.get("/{plant_id}/photos", response_model=List[PlantPhotoResponse])
def list_photos(
    plant_id: str,
    current_user: Dict = Depends(get_current_user),
    gateway: AccessGateway = Depends(get_access_gateway),
    service: PlantService = Depends(get_plant_service)
):
    """Photos of a plant, newest photoDate first"""
    gateway.authorize_record(current_user, "plants", plant_id, "Plant")
    return service.list_photos(plant_id)


@router.post("/{plant_id}/photos", response_model=PlantPhotoResponse, status_code=201)
def add_photo(
    plant_id: str,
    data: PlantPhotoCreate,
    current_user: Dict = Depends(get_current_user),
    gateway: AccessGateway = Depends(get_access_gateway),
    service: PlantService = Depends(get_plant_service)
):
    gateway.authorize_record(current_user, "plants", plant_id, "Plant")
    return service.add_photo(plant_id, data)


@router.delete("/{plant_id}/photos/{photo_id}", status_code=204)
def delete_photo(
    plant_id: str,
    photo_id: str,
    current_user: Dict = Depends(get_current_user),
    gateway: AccessGateway = Depends(get_access_gateway),
    service: PlantService = Depends(get_plant_service)
):
    gateway.authorize_record(current_user, "plants", plant_id, "Plant")
    service.delete_photo(plant_id, photo_id)
    return None


@router.delete("/{plant_id}", status_code=204)
def delete_plant(
    plant_id: str,
    current_user: Dict = Depends(get_current_user),
    gateway: AccessGateway = Depends(get_access_gateway),
    service: PlantService = Depends(get_plant_service)
):
    gateway.authorize_record(current_user, "plants", plant_id, "Plant")
    service.delete_plant(plant_id)
    return None
