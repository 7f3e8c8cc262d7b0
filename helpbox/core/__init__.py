"""
Core Module
============

Shared core utilities and abstractions used across the application.

This module contains framework-agnostic code that defines the fundamental
building blocks of the system.
"""

from helpbox.core.exceptions import (
    ApplicationException,
    DomainException,
    RepositoryException,
    ValidationException,
    ResourceNotFoundException,
    ConflictException,
    AuthenticationException,
    PermissionDeniedException,
    ConfigurationException,
    ExternalServiceException,
    LLMException,
    EmptyModelOutputException,
)

__all__ = [
    "ApplicationException",
    "DomainException",
    "RepositoryException",
    "ValidationException",
    "ResourceNotFoundException",
    "ConflictException",
    "AuthenticationException",
    "PermissionDeniedException",
    "ConfigurationException",
    "ExternalServiceException",
    "LLMException",
    "EmptyModelOutputException",
]
