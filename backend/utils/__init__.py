from decimal import Decimal
import enum
from sqlalchemy.orm import class_mapper

def sqlalchemy_to_dict(obj):
    """Convert a SQLAlchemy object to a JSON-safe dictionary for the audit log."""
    if not obj:
        return None
    mapper = class_mapper(obj.__class__)
    result = {}
    for c in mapper.columns:
        value = getattr(obj, c.key)
        # Dates and datetimes as ISO strings
        if hasattr(value, 'isoformat'):
            value = value.isoformat()
        elif isinstance(value, Decimal):
            value = float(value)
        # Enums by member name, the way SQLAlchemy stores them
        elif isinstance(value, enum.Enum):
            value = value.name
        result[c.key] = value
    return result

def to_jsonable(value):
    """Recursively make pydantic dumps safe for JSON columns (Decimal -> float, dates -> ISO)."""
    if isinstance(value, dict):
        return {k: to_jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_jsonable(v) for v in value]
    if isinstance(value, Decimal):
        return float(value)
    if hasattr(value, 'isoformat'):
        return value.isoformat()
    if isinstance(value, enum.Enum):
        return value.value
    return value

def without_required_nulls(model, data: dict) -> dict:
    """Drop explicit nulls a PATCH body sends for columns that cannot hold NULL."""
    columns = model.__table__.columns
    return {
        key: value for key, value in data.items()
        if value is not None or key not in columns or columns[key].nullable
    }

__all__ = ['sqlalchemy_to_dict', 'to_jsonable', 'without_required_nulls']
