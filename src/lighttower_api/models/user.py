"""User model. Holds seeded accounts; there is no login flow."""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from lighttower_api.models.base import Base, IntegerIDMixin


class User(Base, IntegerIDMixin):
    """An account with a bcrypt-hashed password."""

    __tablename__ = "users"
    __table_args__ = {"sqlite_autoincrement": True}

    username: Mapped[str] = mapped_column(String(100), unique=True, nullable=False, index=True)
    password: Mapped[str] = mapped_column(String(255), nullable=False)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    role: Mapped[str] = mapped_column(String(20), nullable=False, default="user", server_default="user")
