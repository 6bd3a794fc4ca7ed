"""
Custom exceptions for scd-extract with helpful error messages.
"""


class ScdExtractError(Exception):
    """Base exception for scd-extract errors."""

    def __init__(self, message: str, suggestion: str = None):
        self.message = message
        self.suggestion = suggestion
        super().__init__(self.message)

    def __str__(self):
        if self.suggestion:
            return f"{self.message}\n\nSuggestion: {self.suggestion}"
        return self.message


class MalformedDocumentError(ScdExtractError):
    """Input cannot be interpreted as an XML tree."""

    def __init__(self, error_details: str):
        message = f"Invalid SCL document: {error_details}"
        suggestion = (
            "Check that the file is well-formed XML, for example with:\n"
            "  xmllint --noout <file>"
        )
        super().__init__(message, suggestion)


class ExtractionError(ScdExtractError):
    """Errors while extracting a device from a document."""

    pass


class DeviceNotFoundError(ExtractionError):
    """No IED with the requested name exists in the document."""

    def __init__(self, device_name: str, available_devices: list[str] = None):
        self.device_name = device_name
        message = f"Device '{device_name}' not found in document."

        if available_devices:
            device_list = "\n  - ".join(available_devices)
            suggestion = (
                f"Available devices:\n  - {device_list}\n\n"
                "List devices with:\n"
                "  scd-extract devices <file>"
            )
        else:
            suggestion = "The document does not contain any IED elements."
        super().__init__(message, suggestion)


class DanglingReferenceError(ExtractionError):
    """A type reference points to an id missing from DataTypeTemplates."""

    def __init__(self, type_id: str, kind: str, referenced_from: str):
        self.type_id = type_id
        self.kind = kind
        self.referenced_from = referenced_from
        message = f"{kind} '{type_id}' referenced from {referenced_from} is not defined."
        suggestion = (
            "The DataTypeTemplates section is incomplete for this device.\n"
            "Either add the missing definition to the source document or\n"
            "disable strict reference checking in scd-extract.yaml:\n"
            "  extract:\n"
            "    strict_references: false"
        )
        super().__init__(message, suggestion)


class ConfigurationError(ScdExtractError):
    """Configuration file errors."""

    pass


class InvalidConfigError(ConfigurationError):
    """Configuration file is invalid."""

    def __init__(self, error_details: str):
        message = f"Invalid configuration file: {error_details}"

        suggestion = (
            "Fix the scd-extract.yaml file. A minimal valid file is:\n"
            "  format:\n"
            "    indent: '  '\n"
            "  extract:\n"
            "    enum_policy: preserve"
        )
        super().__init__(message, suggestion)


class FileNotFoundError(ScdExtractError):
    """Input file not found."""

    def __init__(self, file_path: str):
        message = f"File not found: {file_path}"
        suggestion = (
            "Check that the file path is correct and the file exists:\n" f"  ls -l {file_path}"
        )
        super().__init__(message, suggestion)


def format_error_for_cli(error: Exception) -> str:
    """
    Format an exception for CLI display with helpful information.

    Args:
        error: The exception to format

    Returns:
        Formatted error message string
    """
    if isinstance(error, ScdExtractError):
        output = f"[red]Error:[/red] {error.message}"
        if error.suggestion:
            output += f"\n\n[yellow]{error.suggestion}[/yellow]"
        return output
    else:
        return f"[red]Error:[/red] {str(error)}"
