"""Credential lifecycle service: register, login, validate and refresh."""
