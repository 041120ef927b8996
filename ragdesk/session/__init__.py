"""Session scope and the admin access gate."""

from ragdesk.session.gate import AccessGate, Role, SessionContext, SessionRegistry

__all__ = ["AccessGate", "Role", "SessionContext", "SessionRegistry"]
