# Re-export Base and ensure all models are imported so metadata is complete
from app.db.session import Base  # noqa: F401  provides Base.metadata
from app import models  # noqa: F401  so Alembic can discover them via Base.metadata
