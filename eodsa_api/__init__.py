"""
EODSA competition management API.

The HTTP application lives in :mod:`eodsa_api.app`; operational tooling
(database initialisation, bootstrapping an administrator, issuing tokens)
lives in :mod:`eodsa_api.cli`.
"""
