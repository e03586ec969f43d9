"""Exception types for recordkit.

Configuration problems fail at definition time, unknown attribute access
fails at the call site. Validation failures are never raised; they live in
the record's ErrorCollection.
"""


class RecordKitError(Exception):
    """Base class for all recordkit errors."""
    pass


class ModelDefinitionError(RecordKitError, ValueError):
    """A model schema was defined incorrectly."""
    pass


class OverlappingAttributeMethodPatternError(ModelDefinitionError):
    """Two attribute method patterns generate the same method name."""

    def __init__(self, method_name: str, first: str, second: str):
        self.method_name = method_name
        self.first = first
        self.second = second
        super().__init__(
            f"Attribute method '{method_name}' is generated by both "
            f"{first} and {second}"
        )


class UnknownAttributeError(RecordKitError, AttributeError):
    """Read or write of an attribute the record type does not declare."""

    def __init__(self, record_type: str, attribute: str):
        self.record_type = record_type
        self.attribute = attribute
        super().__init__(f"unknown attribute '{attribute}' for {record_type}")


class CallbackError(RecordKitError):
    """A callback used the chain incorrectly (e.g. proceeded twice)."""
    pass
