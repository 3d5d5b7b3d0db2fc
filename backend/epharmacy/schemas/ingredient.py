from pydantic import BaseModel, Field


class IngredientResponse(BaseModel):
    id: int
    name: str
    description: str
    is_active_substance: bool

    class Config:
        from_attributes = True


class IngredientCreate(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    description: str = Field(default="", max_length=500)
    is_active_substance: bool = False


class IngredientUpdate(IngredientCreate):
    pass
