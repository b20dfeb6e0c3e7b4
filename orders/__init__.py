from .errors import OrderError, ValidationError, NotFoundError, StorageError
from .identifiers import IdGenerator, SequenceIdGenerator, uuid4_generator
from .store import RecordStore
from .query import search
from .service import OrderService

__all__ = [
    "OrderError", "ValidationError", "NotFoundError", "StorageError",
    "IdGenerator", "SequenceIdGenerator", "uuid4_generator",
    "RecordStore", "search", "OrderService",
]
