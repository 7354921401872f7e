from .encryption import SessionEncryption

__all__ = ["SessionEncryption"]
