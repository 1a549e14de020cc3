class RequestTesterError(Exception):
    """Base error; str(err) is what the window shows."""


class UnsupportedMethod(RequestTesterError):
    def __init__(self, method):
        super().__init__(f"Unsupported HTTP method: {method!r}")
        self.method = method


class TransportError(RequestTesterError):
    pass


class BodyReadError(RequestTesterError):
    pass


class DialogCancelled(RequestTesterError):
    pass


class FileIOError(RequestTesterError):
    pass
