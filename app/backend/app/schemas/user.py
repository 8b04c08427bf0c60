from datetime import datetime
from pydantic import BaseModel, ConfigDict

class UserOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    email: str
    name: str
    phone: str | None = None
    account_type: str | None = None
    role: str | None = None
    external_user_id: int | None = None
    telegram_chat_id: int | None = None
    ctime: datetime
