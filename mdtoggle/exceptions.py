class InvalidFormat(ValueError):
    """Raised when a format name is not in the registry."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Invalid format {name!r}")
