"""
The web server package.
Checks and stops the Nginx process that fronts the proxy daemon.
"""
from .errors import ServiceControlError, StatusQueryError, StopCommandError, StopVerificationError
from .supervisor import ServiceSupervisor, nginx_supervisor

__all__ = [
    "ServiceControlError",
    "ServiceSupervisor",
    "StatusQueryError",
    "StopCommandError",
    "StopVerificationError",
    "nginx_supervisor",
]
