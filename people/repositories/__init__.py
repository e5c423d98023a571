from .person import PersonRepository

__all__ = ["PersonRepository"]
