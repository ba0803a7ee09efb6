from .outbox import ChangeAction, ChangeEvent, Outbox, RecordType

__all__ = ["ChangeAction", "ChangeEvent", "Outbox", "RecordType"]
