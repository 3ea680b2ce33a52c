"""Exception hierarchy shared across the generator."""
from __future__ import annotations


class RoadWeaverError(Exception):
    """Base class for every failure raised by road-weaver."""


class ConfigError(RoadWeaverError):
    pass


class UnknownMarkingError(RoadWeaverError):
    """A marking record carries a type no marking class handles."""


class StateError(RoadWeaverError):
    """A serialized world record is missing fields or is malformed."""
