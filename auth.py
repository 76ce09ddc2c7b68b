"""Admin credential checks. The result is a single authorized yes/no."""

import hmac
from typing import Optional, Protocol


class CredentialVerifier(Protocol):
    def verify(self, email: str, password: str) -> bool:
        ...


class EnvCredentialVerifier:
    """Compares against one admin account taken from configuration.

    With either value unset nobody is authorized.
    """

    def __init__(self, admin_email: Optional[str], admin_password: Optional[str]):
        self.admin_email = admin_email
        self.admin_password = admin_password

    def verify(self, email: str, password: str) -> bool:
        if not (self.admin_email and self.admin_password):
            return False
        email_ok = hmac.compare_digest(email.strip().lower().encode(), self.admin_email.strip().lower().encode())
        password_ok = hmac.compare_digest(password.encode(), self.admin_password.encode())
        return email_ok and password_ok
