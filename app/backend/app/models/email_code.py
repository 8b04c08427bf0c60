from datetime import datetime

from sqlalchemy import Index, Integer, String, DateTime, text
from sqlalchemy.orm import Mapped, mapped_column
from app.db.session import Base
from app.models.enums import CodeType
from app.models.types import BigIntPK

class EmailCode(Base):
    __tablename__ = "email_codes"
    __table_args__ = (Index("ix_email_codes_lookup", "email", "code_type", "ctime"),)

    id: Mapped[int] = mapped_column("code_id", BigIntPK, primary_key=True)
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    # kept as text, "0417" != "417"
    code: Mapped[str] = mapped_column(String(32), nullable=False)
    code_type: Mapped[str] = mapped_column(String(32), nullable=False, server_default=CodeType.registration.value)
    ctime: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, server_default=text("CURRENT_TIMESTAMP"))
    attempts: Mapped[int] = mapped_column(Integer, nullable=False, server_default="0", default=0)
