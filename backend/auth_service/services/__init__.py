"""Service layer.

Application services live in subpackages (``credentials``) and share the
primitives under ``_shared`` (base service, errors and ports). Import them
from their modules, e.g. :mod:`auth_service.services.credentials.service`.
"""
