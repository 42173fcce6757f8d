from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column
from jobportal.db.session import Base
from jobportal.models.common import TimestampMixin

class FacultyUser(Base, TimestampMixin):
    __tablename__ = "faculity_users"
    faculityID: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    email: Mapped[str] = mapped_column(String(200), unique=True, nullable=False)
    mobile: Mapped[str] = mapped_column(String(30), unique=True, nullable=False)
    status: Mapped[int] = mapped_column(Integer, default=1, nullable=False)
    image: Mapped[str | None] = mapped_column(String(255), nullable=True)
