from swissorganizer.storage.store import AppState, StateStore

__all__ = ["AppState", "StateStore"]
