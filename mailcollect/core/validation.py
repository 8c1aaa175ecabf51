import re

# Rejects consecutive dots, leading/trailing dots or hyphens, and domains without a TLD
EMAIL_REGEX = re.compile(r'^[a-zA-Z0-9_%+-]+(\.[a-zA-Z0-9_%+-]+)*@[a-zA-Z0-9]([a-zA-Z0-9-]*[a-zA-Z0-9])?(\.[a-zA-Z0-9]([a-zA-Z0-9-]*[a-zA-Z0-9])?)*\.[a-zA-Z]{2,}$')

MAX_EMAIL_LENGTH = 254


def validate_email(email):
    """Validate email format"""
    if not isinstance(email, str):
        return False
    email = email.strip()
    if not email or len(email) > MAX_EMAIL_LENGTH:
        return False
    return EMAIL_REGEX.match(email) is not None
