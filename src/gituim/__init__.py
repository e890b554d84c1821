"""gituim - browse bare git repositories over HTTP."""

__version__ = "0.1.0"
