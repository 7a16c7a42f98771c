"""
Entity

Content node that user group permissions are assigned on.
"""

from typing import Optional

from sqlmodel import Field, SQLModel


class Entity(SQLModel, table=True):
    """Entity - addressable content item (document, media, ...)"""

    __tablename__ = "entities"

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(max_length=255)
