from .config import settings
from .database import engine, SessionLocal, get_db, Base, transaction, session_scope
from .schema_probe import SchemaProbe, get_schema_probe

__all__ = [
    "settings", "engine", "SessionLocal", "get_db", "Base",
    "transaction", "session_scope", "SchemaProbe", "get_schema_probe",
]
