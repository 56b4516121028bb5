from .records import IsoRecord, ShareRecord

__all__ = [
    "IsoRecord",
    "ShareRecord",
]
