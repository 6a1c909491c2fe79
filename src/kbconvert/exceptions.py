#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Custom exceptions for the kbconvert library.

This module defines the exception classes raised by the conversion pipeline.
Every error records the pipeline stage that triggered it so callers can report
which part of a conversion failed.

Exception Hierarchy
-------------------
- KbConvertError (base exception)

  - ValidationError (parameter/option validation)
    - InvalidOptionsError (wrong options class for a component)
    - ConfigError (unreadable or invalid configuration files)

  - ParsingError (markdown input or AST violates the parser's assumptions)

  - RenderingError (document packaging failures)

  - UnpackingError (binary document could not be opened or walked)

  - HtmlConversionError (HTML to text conversion failures)

Image lookups that find nothing are not errors: resolvers return ``None`` and
the affected image is omitted from the output.

"""

from typing import Any


class KbConvertError(Exception):
    """Base exception class for all kbconvert-specific errors.

    Parameters
    ----------
    message : str
        Human-readable description of the error
    stage : str, optional
        Pipeline stage where the error occurred (e.g. "parse", "package")
    original_error : Exception, optional
        The original exception that caused this error, if applicable

    Attributes
    ----------
    message : str
        The error message
    stage : str or None
        The pipeline stage that failed
    original_error : Exception or None
        The wrapped original exception, if any

    """

    default_stage: str | None = None

    def __init__(self, message: str, stage: str | None = None, original_error: Exception | None = None):
        """Initialize the error with a message, stage and optional original exception."""
        super().__init__(message)
        self.message = message
        self.stage = stage or self.default_stage
        self.original_error = original_error

    def describe(self) -> str:
        """Return the message prefixed with the failing stage, when known."""
        if self.stage:
            return f"[{self.stage}] {self.message}"
        return self.message


class ValidationError(KbConvertError):
    """Exception raised for invalid input parameters or options.

    Parameters
    ----------
    message : str
        Description of the validation error
    parameter_name : str, optional
        Name of the invalid parameter
    parameter_value : any, optional
        The invalid value that was provided
    original_error : Exception, optional
        The original exception that caused this error

    """

    default_stage = "validation"

    def __init__(
        self,
        message: str,
        parameter_name: str | None = None,
        parameter_value: Any = None,
        original_error: Exception | None = None,
    ):
        """Initialize the validation error with parameter details."""
        super().__init__(message, original_error=original_error)
        self.parameter_name = parameter_name
        self.parameter_value = parameter_value


class InvalidOptionsError(ValidationError):
    """Exception raised when a component receives the wrong options class.

    Parameters
    ----------
    component_name : str
        Name of the component that rejected the options
    expected_type : type
        The options class the component expects
    received_type : type
        The options class that was actually passed

    """

    def __init__(self, component_name: str, expected_type: type, received_type: type):
        """Initialize with the expected and received option types."""
        message = (
            f"{component_name} expects options of type {expected_type.__name__}, "
            f"got {received_type.__name__}"
        )
        super().__init__(message, parameter_name="options", parameter_value=received_type)
        self.component_name = component_name
        self.expected_type = expected_type
        self.received_type = received_type


class ConfigError(ValidationError):
    """Exception raised when a configuration file cannot be loaded or applied.

    Parameters
    ----------
    message : str
        Description of the configuration problem
    config_path : str, optional
        Path of the offending configuration file
    original_error : Exception, optional
        The underlying decoding or I/O error

    """

    default_stage = "config"

    def __init__(self, message: str, config_path: str | None = None, original_error: Exception | None = None):
        """Initialize the configuration error."""
        super().__init__(message, parameter_name="config", parameter_value=config_path, original_error=original_error)
        self.config_path = config_path


class ParsingError(KbConvertError):
    """Exception raised when markdown parsing or extension processing fails.

    The whole conversion is aborted and no partial output is produced.

    Parameters
    ----------
    message : str
        Description of the parsing failure
    parsing_stage : str, optional
        The stage of parsing where the error occurred
    original_error : Exception, optional
        The underlying exception that caused the parsing failure

    """

    default_stage = "parse"

    def __init__(self, message: str, parsing_stage: str | None = None, original_error: Exception | None = None):
        """Initialize the parsing error."""
        super().__init__(message, stage=parsing_stage, original_error=original_error)

    @property
    def parsing_stage(self) -> str | None:
        """Stage of parsing where the error occurred."""
        return self.stage


class RenderingError(KbConvertError):
    """Exception raised when the styled blocks cannot be packaged into a document.

    Parameters
    ----------
    message : str
        Description of the rendering failure
    rendering_stage : str, optional
        The stage of rendering where the error occurred
    original_error : Exception, optional
        The underlying exception that caused the rendering failure

    """

    default_stage = "package"

    def __init__(self, message: str, rendering_stage: str | None = None, original_error: Exception | None = None):
        """Initialize the rendering error."""
        super().__init__(message, stage=rendering_stage, original_error=original_error)

    @property
    def rendering_stage(self) -> str | None:
        """Stage of rendering where the error occurred."""
        return self.stage


class UnpackingError(KbConvertError):
    """Exception raised when a binary document cannot be unpacked to HTML."""

    default_stage = "unpack"


class HtmlConversionError(KbConvertError):
    """Exception raised when recovered HTML cannot be converted to text."""

    default_stage = "html-to-text"
