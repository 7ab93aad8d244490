"""Input validation for competition-analysis requests and domains."""

import re
from typing import Any

MISSING_PARAMETERS = "Missing required parameters: domain, keywords"


def validate_domain(domain: str) -> tuple[bool, str]:
    """Validate a domain name.

    Args:
        domain: The domain name to validate.  May include protocol prefix.

    Returns:
        Tuple of (is_valid, error_message).
    """
    if not domain or not isinstance(domain, str):
        return False, "Domain is empty or not a string."
    domain = domain.strip().lower()
    # Strip protocol if present
    if "://" in domain:
        domain = domain.split("://", 1)[1]
    # Strip path and port
    domain = domain.split("/")[0]
    domain = domain.split(":")[0]
    if len(domain) > 253:
        return False, "Domain exceeds maximum length (253 chars)."
    if "." not in domain:
        return False, "Domain must contain at least one dot."
    labels = domain.split(".")
    for label in labels:
        if not label:
            return False, "Domain contains empty label (double dot)."
        if len(label) > 63:
            return False, f"Label '{label}' exceeds 63 chars."
        if not re.match(r"^[a-z0-9]([a-z0-9-]*[a-z0-9])?$", label):
            return False, f"Label '{label}' contains invalid characters."
    return True, ""


def validate_analysis_request(payload: Any) -> tuple[bool, str]:
    """Check the shape of a competition-analysis request body.

    Only a missing domain or a non-list ``keywords`` is rejected; empty
    keyword lists and zero-volume entries are valid input.

    Args:
        payload: Decoded JSON request body.

    Returns:
        Tuple of (is_valid, error_message).  error_message is empty on success.
    """
    if not isinstance(payload, dict):
        return False, MISSING_PARAMETERS
    domain = payload.get("domain")
    if not isinstance(domain, str) or not domain.strip():
        return False, MISSING_PARAMETERS
    if not isinstance(payload.get("keywords"), list):
        return False, MISSING_PARAMETERS
    region = payload.get("region")
    if region is not None and (not isinstance(region, str) or not region.strip()):
        return False, "Region must be a non-empty string."
    timeout = payload.get("timeoutSeconds")
    if timeout is not None:
        if isinstance(timeout, bool) or not isinstance(timeout, (int, float)) or timeout <= 0:
            return False, "timeoutSeconds must be a positive number."
    return True, ""
