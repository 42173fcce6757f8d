from sqlalchemy import Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column
from jobportal.db.session import Base
from jobportal.models.common import TimestampMixin

class Category(Base, TimestampMixin):
    __tablename__ = "categories"
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(200), unique=True, nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
