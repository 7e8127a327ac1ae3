"""Azure Files shares as a flat, path-addressed object store."""

from azfile_store._config import Credential, Endpoint, StorageConfig
from azfile_store._errors import (
    CapabilityNotSupported,
    InitError,
    InvalidPair,
    ListModeInvalid,
    NotFound,
    PairRequired,
    PairUnsupported,
    PermissionDenied,
    StoreError,
    Unexpected,
    Unsupported,
)
from azfile_store._features import Feature, FeatureSet
from azfile_store._iterator import ObjectIterator
from azfile_store._models import ListMode, Object, ObjectMode, StorageMeta
from azfile_store._storage import Storage, new_storager

__version__ = "0.1.0"

__all__ = [
    # Core
    "Storage",
    "new_storager",
    "ObjectIterator",
    # Models
    "Object",
    "ObjectMode",
    "ListMode",
    "StorageMeta",
    # Features
    "Feature",
    "FeatureSet",
    # Config
    "StorageConfig",
    "Endpoint",
    "Credential",
    # Errors
    "StoreError",
    "NotFound",
    "PermissionDenied",
    "Unexpected",
    "Unsupported",
    "CapabilityNotSupported",
    "PairUnsupported",
    "ListModeInvalid",
    "PairRequired",
    "InvalidPair",
    "InitError",
    # Version
    "__version__",
]
