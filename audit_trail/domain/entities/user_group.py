"""
UserGroup Entity

Group of back-office users sharing allowed sections and default permissions.
"""

from typing import List, Optional

from sqlmodel import Column, Field, JSON, SQLModel


class UserGroup(SQLModel, table=True):
    """
    UserGroup entity - named set of section and permission grants.

    Business Rules:
    - alias is unique and stable, name is display only
    - allowed_sections and permissions are rendered verbatim in audit comments
    """

    __tablename__ = "user_groups"

    id: Optional[int] = Field(default=None, primary_key=True)
    alias: str = Field(unique=True, index=True, max_length=255)
    name: str = Field(max_length=255)

    allowed_sections: List[str] = Field(default_factory=list, sa_column=Column(JSON))
    permissions: List[str] = Field(default_factory=list, sa_column=Column(JSON))
