"""
User Entity

Back-office user who performs administrative actions or is the subject of them.
"""

from typing import List, Optional

from sqlmodel import Column, Field, JSON, SQLModel


class User(SQLModel, table=True):
    """
    User entity - back-office account.

    Business Rules:
    - Id 0 is reserved for the system pseudo-identity and is never stored
    - group_aliases lists the aliases of the user groups the user belongs to
    """

    __tablename__ = "users"

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(max_length=255)
    email: str = Field(default="", index=True, max_length=255)

    group_aliases: List[str] = Field(default_factory=list, sa_column=Column(JSON))
