from typing import List, Optional

from pydantic import BaseModel, Field


class ImageUploadResult(BaseModel):
    success: bool = True
    url: str
    filename: str
    originalName: str
    size: int
    path: str


class ImageUploadFailure(BaseModel):
    success: bool = False
    originalName: str
    error: str


class BatchUploadResult(BaseModel):
    success: bool = True
    results: List[ImageUploadResult | ImageUploadFailure] = Field(default_factory=list)
    uploaded: int = 0
    failed: int = 0


class ImageInfo(BaseModel):
    filename: str
    url: str
    path: str
    size: Optional[int] = None


class ImageListResult(BaseModel):
    success: bool = True
    images: List[ImageInfo] = Field(default_factory=list)
    count: int = 0


class ImageDeleteRequest(BaseModel):
    imagePath: str


class ImageDeleteResult(BaseModel):
    success: bool = True
    message: str
