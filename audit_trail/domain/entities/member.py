"""
Member Entity

Front-end member account administered by back-office users.
"""

from typing import Optional

from sqlmodel import Field, SQLModel


class Member(SQLModel, table=True):
    """Member entity - front-end account with an optional email"""

    __tablename__ = "members"

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(max_length=255)
    email: str = Field(default="", index=True, max_length=255)
