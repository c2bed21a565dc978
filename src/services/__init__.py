from src.services.custody_store import KeyCustodyStore


__all__ = [
    "KeyCustodyStore",
]
