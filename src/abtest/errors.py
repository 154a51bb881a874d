"""Exceptions raised by the experiment registry and its helpers."""


class ExperimentError(Exception):
    """Base class for experiment orchestration errors."""


class InvalidArgument(ExperimentError, ValueError):
    """A required argument (id, experiment, helper, callback...) is missing or malformed."""


class DuplicateExperiment(InvalidArgument):
    """An experiment with the same id is already registered."""


class ExperimentNotFound(ExperimentError, LookupError):
    """No experiment is registered under the requested id."""


class IntegrationUnavailable(ExperimentError):
    """The experimentation platform cannot be reached."""
