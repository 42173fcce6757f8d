from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column
from jobportal.db.session import Base
from jobportal.models.common import TimestampMixin

class Employer(Base, TimestampMixin):
    __tablename__ = "employer_user"
    employerID: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    username: Mapped[str] = mapped_column(String(100), nullable=False)
    official_name: Mapped[str | None] = mapped_column(String(200), nullable=True)
    designation: Mapped[str | None] = mapped_column(String(100), nullable=True)
    email: Mapped[str] = mapped_column(String(200), unique=True, nullable=False)
    mobile: Mapped[str | None] = mapped_column(String(30), nullable=True, index=True)
    password: Mapped[str] = mapped_column(String(255), nullable=False)
    employertype: Mapped[str | None] = mapped_column(String(50), nullable=True)
    status: Mapped[str | None] = mapped_column(String(20), nullable=True)
    approval_status: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    featured: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    logo: Mapped[str | None] = mapped_column(String(255), nullable=True)
