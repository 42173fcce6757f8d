from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column
from jobportal.db.session import Base
from jobportal.models.common import TimestampMixin

class AdminRole(Base, TimestampMixin):
    __tablename__ = "admin_roles"
    roleID: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)
    status: Mapped[str | None] = mapped_column(String(20), nullable=True)
