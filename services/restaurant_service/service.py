from sqlalchemy.ext.asyncio import AsyncSession

from shared.errors import ConflictError, NotFoundError

from .models import MenuItem, Restaurant
from .repository import MenuItemRepository, RestaurantRepository
from .schemas import MenuItemCreate, MenuItemUpdate, RestaurantCreate, RestaurantUpdate


class RestaurantService:

    @staticmethod
    async def create_restaurant(db: AsyncSession, owner_id: str, data: RestaurantCreate):
        if await RestaurantRepository.get_by_owner(db, owner_id):
            raise ConflictError("Restaurant already exists for this owner")
        restaurant = Restaurant(
            owner_id=owner_id,
            name=data.name,
            cuisine=data.cuisine,
            banner=data.banner,
        )
        await RestaurantRepository.create_restaurant(db, restaurant)
        # Re-read so the (empty) menu relationship is loaded for the response
        return await RestaurantRepository.get_by_id(db, restaurant.id)

    @staticmethod
    async def list_restaurants(db: AsyncSession):
        return await RestaurantRepository.get_all_restaurants(db)

    @staticmethod
    async def get_restaurant(db: AsyncSession, restaurant_id: str) -> Restaurant:
        restaurant = await RestaurantRepository.get_by_id(db, restaurant_id)
        if not restaurant:
            raise NotFoundError("Restaurant not found")
        return restaurant

    @staticmethod
    async def get_owned_restaurant(db: AsyncSession, owner_id: str) -> Restaurant:
        restaurant = await RestaurantRepository.get_by_owner(db, owner_id)
        if not restaurant:
            raise NotFoundError("Restaurant not found. Please create your restaurant first.")
        return restaurant

    @staticmethod
    async def update_restaurant(db: AsyncSession, owner_id: str, data: RestaurantUpdate):
        restaurant = await RestaurantService.get_owned_restaurant(db, owner_id)
        for field, value in data.model_dump(exclude_unset=True).items():
            if value is not None or field == "banner":
                setattr(restaurant, field, value)
        return await RestaurantRepository.save(db, restaurant)

    @staticmethod
    async def get_menu(db: AsyncSession, restaurant_id: str):
        await RestaurantService.get_restaurant(db, restaurant_id)
        return await MenuItemRepository.list_for_restaurant(db, restaurant_id)

    @staticmethod
    async def get_my_menu(db: AsyncSession, owner_id: str):
        restaurant = await RestaurantService.get_owned_restaurant(db, owner_id)
        return await MenuItemRepository.list_for_restaurant(db, restaurant.id)

    @staticmethod
    async def create_menu_item(db: AsyncSession, owner_id: str, data: MenuItemCreate) -> MenuItem:
        restaurant = await RestaurantService.get_owned_restaurant(db, owner_id)
        item = MenuItem(
            restaurant_id=restaurant.id,
            name=data.name,
            description=data.description,
            price=data.price,
            image=data.image,
            veg=data.veg,
        )
        return await RestaurantRepository.save(db, item)

    @staticmethod
    async def _owned_item(db: AsyncSession, owner_id: str, item_id: str) -> MenuItem:
        restaurant = await RestaurantService.get_owned_restaurant(db, owner_id)
        item = await MenuItemRepository.get_by_id(db, item_id)
        if not item or item.restaurant_id != restaurant.id:
            raise NotFoundError("Menu item not found")
        return item

    @staticmethod
    async def update_menu_item(
        db: AsyncSession, owner_id: str, item_id: str, data: MenuItemUpdate
    ) -> MenuItem:
        item = await RestaurantService._owned_item(db, owner_id, item_id)
        for field, value in data.model_dump(exclude_unset=True).items():
            if value is not None or field == "description":
                setattr(item, field, value)
        return await RestaurantRepository.save(db, item)

    @staticmethod
    async def delete_menu_item(db: AsyncSession, owner_id: str, item_id: str) -> None:
        item = await RestaurantService._owned_item(db, owner_id, item_id)
        await MenuItemRepository.delete(db, item)
