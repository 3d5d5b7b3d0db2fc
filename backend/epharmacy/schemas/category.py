from pydantic import BaseModel, Field
from typing import Optional, List


class CategoryResponse(BaseModel):
    id: int
    name: str
    parent_category_id: Optional[int] = None
    subcategory_ids: List[int] = []

    class Config:
        from_attributes = True


class CategoryCreate(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    parent_category_id: Optional[int] = None

    class Config:
        str_strip_whitespace = True


class CategoryUpdate(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    parent_category_id: Optional[int] = None

    class Config:
        str_strip_whitespace = True
