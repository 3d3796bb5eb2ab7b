class RebootToError(Exception):
    """Base class for errors raised by reboot-to."""


class ServiceUnavailable(RebootToError):
    """The system bus or the logind manager interface could not be reached."""


class CallFailure(RebootToError):
    """A logind method call could not be dispatched."""

    def __init__(self, method: str, message: str = ''):
        self.method = method
        super().__init__(f'{method}: {message}' if message else method)
