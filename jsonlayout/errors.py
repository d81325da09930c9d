"""
Exception types for jsonlayout.
"""


class ConfigError(Exception):
    """Configuration validation error"""
    pass


class EncodeError(Exception):
    """The codec rejected a value (unserializable, circular or non-finite)"""
    pass


class SizeExceeded(Exception):
    """Encoded body is longer than the budget"""

    def __init__(self, length: int, budget: float):
        self.length = length
        self.budget = budget
        super().__init__(f"length {length} > {int(budget)}")
