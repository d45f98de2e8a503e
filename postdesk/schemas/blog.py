from typing import Dict, List, Optional, Union

from pydantic import BaseModel, Field


class PostSummary(BaseModel):
    filename: str
    slug: str
    title: str
    date: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    categories: str = ""


class PostDetail(PostSummary):
    body: str
    metadata: Dict[str, Union[str, List[str]]] = Field(default_factory=dict)


class PostPayload(BaseModel):
    """Body of a create/update request, as sent by the editor form."""

    title: Optional[str] = None
    date: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    categories: Optional[str] = None
    body: Optional[str] = None


class PostWriteResult(BaseModel):
    message: str
    filename: str
    slug: str
    path: str
    previousFilename: Optional[str] = None


class PostDeleteResult(BaseModel):
    message: str
    filename: str
