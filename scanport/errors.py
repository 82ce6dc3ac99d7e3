class ScanportError(Exception):
    """Base class for every error the scanner reports to the user."""
    pass


class InvalidArgument(ScanportError):
    """Raised when the command line is malformed or incomplete."""
    pass


class InvalidSubnet(InvalidArgument):
    """Raised when a subnet is not shaped A.B.C.x/24."""
    pass


class InvalidPort(InvalidArgument):
    """Raised when a port is not an unsigned 16-bit integer."""
    pass


class InvalidTimeout(InvalidArgument):
    """Raised when a timeout is not a non-negative number of seconds."""
    pass


class ProbeIOError(ScanportError):
    """Raised when a socket operation fails in a way no outcome covers."""
    pass
