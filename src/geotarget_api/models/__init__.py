"""ORM models. Importing this package registers every table on ``Base.metadata``."""

from geotarget_api.models.address_mapping import AddressMapping
from geotarget_api.models.base import Base

__all__ = [
    "AddressMapping",
    "Base",
]
