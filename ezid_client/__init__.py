"""Client for the EZID persistent identifier registration service."""

__title__ = "Client for the EZID identifier registration service"
__version__ = VERSION = "1.0.0"
__author__ = "NCEAS Developers"
