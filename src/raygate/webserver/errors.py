class ServiceControlError(RuntimeError):
    """Base class for failures while querying or stopping an external service."""


class StatusQueryError(ServiceControlError):
    pass


class StopCommandError(ServiceControlError):
    pass


class StopVerificationError(ServiceControlError):
    pass
