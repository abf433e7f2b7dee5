from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from shared.config.database import get_db
from shared.security import Actor, Role, require_roles

from .schemas import (
    MenuItemCreate,
    MenuItemResponse,
    MenuItemUpdate,
    RestaurantCreate,
    RestaurantResponse,
    RestaurantUpdate,
)
from .service import RestaurantService

public_router = APIRouter()
owner_router = APIRouter(prefix="/me")

restaurant_owner = require_roles(Role.RESTAURANT)

@public_router.get("/health", include_in_schema=False)
async def health_check():
    return {"service": "restaurant", "status": "running"}


# --- OWNER ENDPOINTS ---

@public_router.post("/", response_model=RestaurantResponse, status_code=status.HTTP_201_CREATED)
async def create_restaurant(
    payload: RestaurantCreate,
    actor: Actor = Depends(restaurant_owner),
    db: AsyncSession = Depends(get_db),
):
    return await RestaurantService.create_restaurant(db, actor.id, payload)


@owner_router.get("/restaurant", response_model=RestaurantResponse)
async def get_my_restaurant(
    actor: Actor = Depends(restaurant_owner), db: AsyncSession = Depends(get_db)
):
    return await RestaurantService.get_owned_restaurant(db, actor.id)


@owner_router.put("/restaurant", response_model=RestaurantResponse)
async def update_my_restaurant(
    payload: RestaurantUpdate,
    actor: Actor = Depends(restaurant_owner),
    db: AsyncSession = Depends(get_db),
):
    return await RestaurantService.update_restaurant(db, actor.id, payload)


@owner_router.get("/menu-items", response_model=list[MenuItemResponse])
async def list_my_menu_items(
    actor: Actor = Depends(restaurant_owner), db: AsyncSession = Depends(get_db)
):
    return await RestaurantService.get_my_menu(db, actor.id)


@owner_router.post(
    "/menu-items", response_model=MenuItemResponse, status_code=status.HTTP_201_CREATED
)
async def create_menu_item(
    payload: MenuItemCreate,
    actor: Actor = Depends(restaurant_owner),
    db: AsyncSession = Depends(get_db),
):
    return await RestaurantService.create_menu_item(db, actor.id, payload)


@owner_router.put("/menu-items/{item_id}", response_model=MenuItemResponse)
async def update_menu_item(
    item_id: str,
    payload: MenuItemUpdate,
    actor: Actor = Depends(restaurant_owner),
    db: AsyncSession = Depends(get_db),
):
    return await RestaurantService.update_menu_item(db, actor.id, item_id, payload)


@owner_router.delete("/menu-items/{item_id}")
async def delete_menu_item(
    item_id: str,
    actor: Actor = Depends(restaurant_owner),
    db: AsyncSession = Depends(get_db),
):
    await RestaurantService.delete_menu_item(db, actor.id, item_id)
    return {"message": "Menu item deleted successfully"}


# --- PUBLIC CATALOGUE ---

@public_router.get("/", response_model=list[RestaurantResponse])
async def list_restaurants(db: AsyncSession = Depends(get_db)):
    return await RestaurantService.list_restaurants(db)


@public_router.get("/{restaurant_id}", response_model=RestaurantResponse)
async def get_restaurant(restaurant_id: str, db: AsyncSession = Depends(get_db)):
    return await RestaurantService.get_restaurant(db, restaurant_id)


@public_router.get("/{restaurant_id}/menu", response_model=list[MenuItemResponse])
async def get_restaurant_menu(restaurant_id: str, db: AsyncSession = Depends(get_db)):
    return await RestaurantService.get_menu(db, restaurant_id)
