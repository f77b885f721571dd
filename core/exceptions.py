"""
Custom exceptions for the Explorer query-state engine.

State transitions never raise for bad user input: unknown visualizations,
malformed filters and the like degrade to defaults. The exceptions below
cover the cases that are the caller's fault (a malformed package model,
broken configuration, undecodable exported parameters).
"""

from typing import Optional, Any


class ExplorerError(Exception):
    """Base exception for all Explorer errors."""

    def __init__(self, message: str, context: Optional[dict] = None):
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def __str__(self) -> str:
        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            return f"{self.message} (Context: {context_str})"
        return self.message


class ConfigurationError(ExplorerError):
    """Raised when there are issues with configuration loading or validation."""

    def __init__(self, message: str, config_file: Optional[str] = None, field: Optional[str] = None):
        context = {}
        if config_file:
            context['config_file'] = config_file
        if field:
            context['field'] = field
        super().__init__(message, context)


class PackageModelError(ExplorerError):
    """Raised when a package model lacks data the engine needs for defaults."""

    def __init__(self, message: str, package_id: Optional[str] = None, collection: Optional[str] = None):
        context = {}
        if package_id:
            context['package_id'] = package_id
        if collection:
            context['collection'] = collection
        super().__init__(message, context)


class ValidationError(ExplorerError):
    """Raised when imported query parameters cannot be decoded."""

    def __init__(self, message: str, field: Optional[str] = None, value: Optional[Any] = None):
        context = {}
        if field:
            context['field'] = field
        if value is not None:
            context['value'] = str(value)
        super().__init__(message, context)
