from .credentials import CredentialStore
from .gate import ALLOW, AuthGate, Decision

__all__ = ["ALLOW", "AuthGate", "CredentialStore", "Decision"]
