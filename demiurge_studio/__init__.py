"""demiurge-studio - client for the Demiurge chain JSON-RPC node."""

__version__ = "0.1.0"
__logo__ = "⛓"
