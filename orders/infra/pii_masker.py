"""
PII (Personally Identifiable Information) masking utilities.
"""
import re


UUID_RE = re.compile(r'^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$', re.I)

PII_FIELDS = {
    "email", "phone", "customer_id", "street", "postal_code", "shipping_address",
}


def mask_email(email: str) -> str:
    """Mask email address."""
    if "@" not in email:
        return email
    local, domain = email.split("@", 1)
    masked = "**" if len(local) <= 2 else local[:2] + "*" * (len(local) - 2)
    return f"{masked}@{domain}"


def mask_phone(phone: str) -> str:
    """Mask phone number."""
    if len(phone) <= 4:
        return "*" * len(phone)
    return phone[:2] + "*" * (len(phone) - 4) + phone[-2:]


def mask_uuid(uuid_str: str) -> str:
    """Mask UUID (show first 8 chars only)."""
    if len(uuid_str) < 8:
        return "*" * len(uuid_str)
    return uuid_str[:8] + "-****-****-****-************"


def mask_text(value: str) -> str:
    """Keep first and last character of free text."""
    if len(value) <= 2:
        return "*" * len(value)
    return value[0] + "*" * (len(value) - 2) + value[-1]


def mask_value(value):
    if isinstance(value, dict):
        return {k: mask_value(v) for k, v in value.items()}
    if not isinstance(value, str):
        return value
    if "@" in value:
        return mask_email(value)
    if UUID_RE.match(value):
        return mask_uuid(value)
    if re.match(r'^[\d\s\+\-\(\)]+$', value):
        return mask_phone(value)
    return mask_text(value)


def mask_pii_in_dict(data: dict) -> dict:
    """Mask PII in dictionary recursively."""
    masked = {}
    for key, value in data.items():
        if key.lower() in PII_FIELDS:
            masked[key] = mask_value(value)
        elif isinstance(value, dict):
            masked[key] = mask_pii_in_dict(value)
        elif isinstance(value, list):
            masked[key] = [mask_pii_in_dict(item) if isinstance(item, dict) else item for item in value]
        else:
            masked[key] = value
    return masked
