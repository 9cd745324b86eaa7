"""Key provider messages, image-layer key wrapping and sample TEE evidence for confidential containers."""

__version__ = "0.1.0"

__all__ = ["attester", "crypto", "encryption", "message", "pairing", "payload"]