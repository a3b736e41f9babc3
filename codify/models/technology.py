"""Technology ORM — static catalog row, referenced by projects, never owned."""

from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from codify.db.base import Base


class Technology(Base):
    __tablename__ = "technologies"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(50), nullable=False, unique=True)
