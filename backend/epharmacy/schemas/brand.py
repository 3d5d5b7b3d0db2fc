from pydantic import BaseModel, Field


class BrandResponse(BaseModel):
    id: int
    name: str

    class Config:
        from_attributes = True


class BrandCreate(BaseModel):
    name: str = Field(min_length=1, max_length=100)


class BrandUpdate(BaseModel):
    name: str = Field(min_length=1, max_length=100)
