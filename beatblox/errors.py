'''
Exceptions for the beatblox library
'''


class BeatbloxException(Exception):
    """
    Generic base class for beatblox exceptions
    """
    pass


class BeatbloxTypeError(BeatbloxException, TypeError):
    """
    Type error
    """
    pass


class BeatbloxValueError(BeatbloxException, ValueError):
    """
    Value error
    """
    pass


class BeatbloxTimingError(BeatbloxException):
    """
    Unsupported MIDI timing format (only metrical ticks-per-beat timing can be parsed)
    """
    pass


class BeatbloxQuantizationError(BeatbloxException):
    """
    Quantization error (a length that cannot be expressed as tied canonical durations)
    """
    pass


class BeatbloxContentError(BeatbloxException):
    """
    Content error (such as no tracks)
    """
    pass


class BeatbloxTimeSignatureError(BeatbloxContentError):
    """
    The piece has no time signature, so durations have no beat type to be measured against
    """
    pass


class BeatbloxNotImplemented(BeatbloxException):
    """
    Not implemented error
    """
    pass
