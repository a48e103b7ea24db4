"""Certificate-credential OAuth2 token issuance."""

__version__ = "0.1.0"
