"""Version 1 of the EODSA Competition API, mounted under ``/api/v1``."""
