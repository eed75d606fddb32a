"""
Build-time errors for the Prisma stack.

Every error here is fatal: synthesis aborts and the message is shown to
whoever ran `cdk synth` / `cdk deploy`. Nothing is retried.
"""

from typing import Optional


class StackBuildError(Exception):
    """Base exception for all stack build errors."""

    def __init__(self, message: str, details: Optional[dict] = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)


class MissingInputError(StackBuildError):
    """A layer source path does not exist at build time."""

    def __init__(self, missing: list, details: Optional[dict] = None):
        self.missing = [str(p) for p in missing]
        message = "Layer source path(s) not found: " + ", ".join(self.missing)
        super().__init__(message, details)


class LayerFilesystemError(StackBuildError):
    """Deleting, creating or copying the layer directory failed."""


class ConfigurationError(StackBuildError):
    """Invalid or missing stack configuration."""


class StackNotFoundError(StackBuildError):
    """The deployed CloudFormation stack could not be found."""

    def __init__(self, stack_name: str):
        self.stack_name = stack_name
        super().__init__(f"Stack '{stack_name}' not found")


class MissingOutputError(StackBuildError):
    """A declared stack output is missing from the deployed stack."""

    def __init__(self, stack_name: str, output_key: str):
        self.stack_name = stack_name
        self.output_key = output_key
        super().__init__(f"Stack '{stack_name}' has no output '{output_key}'")
