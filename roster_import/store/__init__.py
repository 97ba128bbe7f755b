from .student_store import StoreError, StudentStore, class_registry

__all__ = [
    "StoreError",
    "StudentStore",
    "class_registry",
]
