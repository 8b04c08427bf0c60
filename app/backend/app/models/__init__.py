# Import models here so Base.metadata is complete for create_all / Alembic
from app.models.user import User  # noqa: F401
from app.models.email_code import EmailCode  # noqa: F401
from app.models.session import ClientSession  # noqa: F401
