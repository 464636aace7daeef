class ConfigurationError(Exception):
    """Base class for fatal configuration loading failures."""


class ConfigFileNotFoundError(ConfigurationError):
    def __init__(self, file_name: str, tried: list[str]):
        self.file_name = file_name
        self.tried = tried
        super().__init__(
            f"Config Error: could not find `{file_name}` in any of: {', '.join(tried)}"
        )


class InterpreterError(ConfigurationError):
    """The configuration script failed to compile or run."""


class MissingKeyError(ConfigurationError):
    def __init__(self, key: str):
        self.key = key
        super().__init__(f"Config Error: required option `{key}` is missing")


class TypeMismatchError(ConfigurationError):
    def __init__(self, key: str, expected: str, actual: str):
        self.key = key
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Config Error: option `{key}` should be {expected}, got {actual}"
        )
