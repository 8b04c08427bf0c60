from datetime import datetime

from sqlalchemy import BigInteger, String, DateTime, ForeignKey, text
from sqlalchemy.orm import Mapped, mapped_column
from app.db.session import Base
from app.models.types import JSONDoc

class ClientSession(Base):
    __tablename__ = "sessions"

    id: Mapped[str] = mapped_column("session_id", String(64), primary_key=True)
    # non-owning reference, deleting a user is not this table's concern
    user_id: Mapped[int | None] = mapped_column(
        BigInteger, ForeignKey("users.user_id", ondelete="SET NULL"), nullable=True, index=True
    )
    data: Mapped[dict] = mapped_column(JSONDoc, nullable=False, default=dict, server_default=text("'{}'"))
    ctime: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, server_default=text("CURRENT_TIMESTAMP"))
