"""Exception types raised by perseform.

Absent data (a form config, form state or global value that was never
saved) is not an error and is reported as ``None``. These exceptions
cover store failures and the cases where a caller asks for something
that cannot be computed without data that is missing.
"""


class PerseformError(Exception):
    """Base class for all perseform errors."""

    pass


class StoreError(PerseformError):
    """Raised when the underlying value store fails to read or write."""

    def __init__(self, operation: str, namespace: str, record_id: str, detail: str) -> None:
        self.operation = operation
        self.namespace = namespace
        self.record_id = record_id
        super().__init__(f"Store {operation} failed for {namespace}/{record_id}: {detail}")


class ConfigNotFoundError(PerseformError):
    """Raised when an operation needs a form config that is not stored."""

    def __init__(self, form_id: str) -> None:
        self.form_id = form_id
        super().__init__(f"Form config not found: {form_id}")


class InputNotFoundError(PerseformError):
    """Raised when a form config does not declare the requested input."""

    def __init__(self, form_id: str, input_id: str) -> None:
        self.form_id = form_id
        self.input_id = input_id
        super().__init__(f"Input {input_id!r} is not declared by form config {form_id!r}")


class DependencyCycleError(PerseformError):
    """Raised when a transitive dependency walk revisits an input."""

    def __init__(self, path: list[tuple[str, str]]) -> None:
        self.path = path
        chain = " -> ".join(f"{form_id}.{input_id}" for form_id, input_id in path)
        super().__init__(f"Dependency cycle detected: {chain}")


class OptionsResolverNotFoundError(PerseformError):
    """Raised when an input names an options resolver that is not registered."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"No options resolver registered under name: {name}")


class FormDocumentError(PerseformError):
    """Raised when a form document on disk cannot be loaded or validated."""

    pass
