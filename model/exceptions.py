#!/usr/bin/env python3
"""
Custom exceptions for the Bayesian Regression Primer.

This module provides a hierarchy of exception classes for the error
scenarios that may occur while simulating data, building models,
sampling and plotting.
"""


class PrimerError(Exception):
    """Base exception class for all primer errors."""
    def __init__(self, message, details=None):
        self.message = message
        self.details = details
        super().__init__(message)

    def __str__(self):
        if self.details:
            return f"{self.message} - Details: {self.details}"
        return self.message


class DataError(PrimerError):
    """Error related to data simulation or the data mapping handed to a model."""
    pass


# Model-related errors
class ModelError(PrimerError):
    """Base class for model-related errors."""
    pass


class ModelSpecError(ModelError):
    """Error related to a malformed model specification."""
    pass


class ModelBuildError(ModelError):
    """Error related to translating a specification into a PyMC model."""
    pass


class SamplingError(ModelError):
    """Error related to MCMC or posterior predictive sampling."""
    pass


class VisualizationError(ModelError):
    """Error related to plotting or summarizing posterior draws."""
    pass


class ConfigurationError(PrimerError):
    """Error related to configuration."""
    pass
