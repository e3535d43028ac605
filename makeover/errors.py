
class MakeoverError(Exception):
    kind = "upstream"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ConfigurationError(MakeoverError):
    kind = "configuration"


class ValidationError(MakeoverError):
    kind = "validation"


class UpstreamError(MakeoverError):
    kind = "upstream"
