from .db_init import init_db
from .models import Base

__all__ = ["Base", "init_db"]
