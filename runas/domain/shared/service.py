"""Service base class."""

from dataclasses import dataclass
from typing import dataclass_transform


@dataclass_transform()
class _ServiceMeta(type):
    """Metaclass that applies @dataclass to subclasses."""

    def __new__(mcs, name: str, bases: tuple, namespace: dict):
        cls = super().__new__(mcs, name, bases, namespace)
        if any(isinstance(b, mcs) for b in bases):
            return dataclass(cls, eq=False)
        return cls


class Service(metaclass=_ServiceMeta):
    """Base class for execution services.

    Subclasses are automatically dataclasses, with collaborators declared as
    fields and passed by keyword. Services compare by identity.
    """

    pass
