from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, Field


class RestaurantCreate(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    cuisine: str = Field(min_length=1, max_length=120)
    banner: Optional[str] = None


class RestaurantUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=200)
    cuisine: Optional[str] = Field(default=None, min_length=1, max_length=120)
    banner: Optional[str] = None


class MenuItemCreate(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    description: Optional[str] = None
    price: Decimal = Field(gt=0, max_digits=10, decimal_places=2)
    image: str = ""
    veg: bool = True


class MenuItemUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=200)
    description: Optional[str] = None
    price: Optional[Decimal] = Field(default=None, gt=0, max_digits=10, decimal_places=2)
    image: Optional[str] = None
    veg: Optional[bool] = None


class MenuItemResponse(BaseModel):
    id: str
    restaurant_id: str
    name: str
    description: Optional[str]
    price: Decimal
    image: str
    veg: bool
    created_at: datetime

    class Config:
        from_attributes = True


class RestaurantResponse(BaseModel):
    id: str
    owner_id: str
    name: str
    cuisine: str
    banner: Optional[str]
    created_at: datetime
    menu_items: List[MenuItemResponse] = []

    class Config:
        from_attributes = True
