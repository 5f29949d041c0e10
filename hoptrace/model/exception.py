class BusinessException(Exception):
    """Thrown if a business error requires the program execution to abort"""
    pass


class ConfigurationException(BusinessException):
    """Thrown if a configuration error is encountered"""
    pass


class ResolutionError(BusinessException):
    """Thrown if the destination host name does not resolve to any IPv4 address"""
    pass


class PrivilegeError(BusinessException):
    """Thrown if the process lacks the privilege to open raw sockets"""
    pass


class ListenerSetupError(BusinessException):
    """Thrown if the shared ICMP receive socket cannot be opened"""
    pass


class ReceiveError(BusinessException):
    """Thrown if reading from the shared ICMP receive socket fails, which makes it unusable for the run"""
    pass


class ProbeError(Exception):
    """Base for errors that only affect a single probe and are recorded in its outcome"""
    pass


class SendError(ProbeError):
    pass


class ReceiveTimeout(ProbeError):
    pass


class ParseError(ProbeError):
    pass
