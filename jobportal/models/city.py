from sqlalchemy import Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column
from jobportal.db.session import Base
from jobportal.models.common import TimestampMixin

class City(Base, TimestampMixin):
    __tablename__ = "cities"
    __table_args__ = (UniqueConstraint("name", "state_id", name="uq_cities_name_state"),)
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(150), nullable=False)
    state_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    status: Mapped[str | None] = mapped_column(String(20), nullable=True)
