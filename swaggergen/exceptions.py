"""Custom exceptions for swaggergen.

This module defines the hierarchy of exceptions raised by the generation
pipeline. Every stage fails fast with one of these types so callers can
tell a broken document apart from a naming conflict or a disk problem.
"""


class SwaggerGenError(Exception):
    """Base exception for all swaggergen errors.

    All exceptions raised by swaggergen inherit from this class, making it
    easy to catch every generation failure with a single except clause.

    Example:
        try:
            codegen.generate()
        except SwaggerGenError as e:
            print(f"swaggergen error: {e}")
    """

    def __init__(self, message: str, *args, **kwargs):
        self.message = message
        super().__init__(message, *args, **kwargs)


class SpecError(SwaggerGenError):
    """Base exception for specification document errors."""

    pass


class SpecFetchError(SpecError):
    """The specification document could not be retrieved.

    Raised when a remote document answers with a non-success status or the
    request itself fails, and when a local file cannot be read.

    Attributes:
        source: The URL or file path that failed.
        status: The HTTP status code, when a response was received.
        cause: The underlying exception, if any.
    """

    def __init__(
        self,
        source: str,
        status: int | None = None,
        cause: Exception | None = None,
    ):
        self.source = source
        self.status = status
        self.cause = cause
        message = f"Failed to fetch specification from '{source}'"
        if status is not None:
            message += f' (HTTP {status})'
        if cause:
            message += f': {cause}'
        super().__init__(message)


class SpecParseError(SpecError):
    """The specification payload is not well-formed structured data.

    Attributes:
        source: The URL or file path of the payload.
        cause: The underlying decoder exception, if any.
    """

    def __init__(self, source: str, cause: Exception | str | None = None):
        self.source = source
        self.cause = cause
        message = f"Failed to parse specification from '{source}'"
        if cause:
            message += f': {cause}'
        super().__init__(message)


class SpecValidationError(SpecError):
    """The parsed document lacks a section the pipeline requires.

    Attributes:
        source: The URL or file path of the document.
        errors: List of validation error messages.
    """

    def __init__(self, source: str, errors: list[str] | None = None):
        self.source = source
        self.errors = errors or []
        message = f"Specification validation failed for '{source}'"
        if errors:
            message += f': {"; ".join(errors)}'
        super().__init__(message)


class CodeGenerationError(SwaggerGenError):
    """Error while deriving or rendering the client modules."""

    pass


class NameCollisionError(CodeGenerationError):
    """Two operations in one resource group derived the same function name.

    Attributes:
        group: The resource group identifier.
        name: The colliding function name.
        first: The ``METHOD route`` of the operation that claimed the name.
        second: The ``METHOD route`` of the operation that collided with it.
    """

    def __init__(self, group: str, name: str, first: str, second: str):
        self.group = group
        self.name = name
        self.first = first
        self.second = second
        super().__init__(
            f"Function name '{name}' in group '{group}' is derived by both "
            f'{first} and {second}; give one of them a distinct operationId'
        )


class FileSystemError(SwaggerGenError):
    """An artifact or directory could not be written or removed.

    Output written before the failure is left in place.

    Attributes:
        path: The path being written or removed.
        cause: The underlying OS error.
    """

    def __init__(self, path: str, cause: Exception | None = None):
        self.path = path
        self.cause = cause
        message = f"Failed to write output at '{path}'"
        if cause:
            message += f': {cause}'
        super().__init__(message)


class ConfigurationError(SwaggerGenError):
    """Error in configuration.

    Attributes:
        config_path: The path to the configuration file, if applicable.
        field: The specific configuration field that is invalid.
    """

    def __init__(
        self, message: str, config_path: str | None = None, field: str | None = None
    ):
        self.config_path = config_path
        self.field = field
        full_message = message
        if config_path:
            full_message = f"{message} in '{config_path}'"
        if field:
            full_message += f' (field: {field})'
        super().__init__(full_message)
