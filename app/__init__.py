"""Nutrigate: identity, authentication, and verification-status service."""
