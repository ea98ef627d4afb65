"""Helpers that make user-controlled values safe to put in log events."""


def sanitize(value: str | None) -> str:
    """Strip CR/LF and replace tabs so a value cannot forge log lines."""
    if not value:
        return ""
    return value.replace("\r", "").replace("\n", "").replace("\t", " ")


def mask_id(value: str | None) -> str:
    """
    Mask an identifier, keeping only its first 8 characters.

    Example: "a1b2c3d4-e5f6-7890-abcd-ef1234567890" -> "a1b2c3d4-****"
    """
    sanitized = sanitize(value)
    if len(sanitized) > 8:
        return sanitized[:8] + "-****"
    return sanitized


def mask_storage_key(storage_key: str | None) -> str:
    """
    Mask the account segment of a storage key.

    Example: "a1b2c3d4-.../properties/2026/f00.jpg" -> "a1b2c3d4-****/properties/2026/f00.jpg"
    """
    sanitized = sanitize(storage_key)
    first_slash = sanitized.find("/")
    if first_slash > 0:
        return mask_id(sanitized[:first_slash]) + sanitized[first_slash:]
    return sanitized
