"""Errors raised by the connection factory and the template."""


class InfluxTemplateError(ValueError):
    """Base class for wiring errors detected before any request is sent."""

    pass


class ConfigurationMissing(InfluxTemplateError):
    """Raised when a connection is requested before properties are supplied."""

    pass


class IncompleteConfiguration(InfluxTemplateError):
    """Raised when a template lacks its connection, properties or converter."""

    def __init__(self, missing: list[str]) -> None:
        self.missing = list(missing)
        super().__init__(f"InfluxDB template is missing: {', '.join(self.missing)}")
