import collections
from fractions import Fraction
from beatblox.errors import *
from beatblox import constants


class TimeSignature(collections.namedtuple('TimeSignature',
                                           ['beats_per_measure', 'beat_type', 'time_of_occurrence'])):
    """
    A time signature change.  The beat type is kept as the power-of-two exponent of the
    denominator, the way MIDI files store it, so 3/4 time has a beat_type of 2.
    """
    __slots__ = ()

    @property
    def denominator(self):
        return 2 ** self.beat_type

    def __str__(self):
        return "%d/%d at tick %d" % (self.beats_per_measure, self.denominator, self.time_of_occurrence)


# A note (or, with REST_NOTE_NUM, a silence) as read from a track; times are in ticks
RawInterval = collections.namedtuple('RawInterval', ['note_num', 'start_time', 'duration', 'velocity', 'channel'])


class BeatbloxBase:
    def __init__(self):
        self._options = {}

    def get_option(self, arg, default=None):
        """
        Get an option

        :param arg: option name
        :type arg: str
        :param default: default value
        :type default: type of option
        :return: value of option
        :rtype: option type
        """
        if arg in self._options:
            return self._options[arg]
        return default

    def set_options(self, **kwargs):
        """
        Set options.  All option keywords are converted to lowercase.

        :param kwargs: options
        :type kwargs: keyword options
        """
        for op, val in kwargs.items():
            self._options[op.lower()] = val


class BeatbloxIO(BeatbloxBase):
    def __init__(self):
        BeatbloxBase.__init__(self)

    def to_piece(self, filename, **kwargs):
        """
        Imports a file into a Piece

        :param filename: filename to import
        :type filename: str
        :param kwargs: Keyword options for the particular I/O class
        :return: notated piece
        :rtype: Piece
        """
        raise BeatbloxNotImplemented("Not implemented")

    def to_bin(self, piece, **kwargs):
        """
        Outputs a piece into the desired format (which may be ASCII text)

        :param piece: piece to export
        :type piece: Piece
        :param kwargs: Keyword options for the particular I/O class
        :return: binary
        :rtype: either str or bytearray, depending on the output
        """
        raise BeatbloxNotImplemented("Not implemented")

    def to_file(self, piece, filename, **kwargs):
        """
        Writes a piece to a file

        :param piece: piece to export
        :type piece: Piece
        :param filename: Name of output file
        :type filename: str
        :param kwargs: Keyword options for the particular I/O class
        :return: True on success
        :rtype: bool
        """
        raise BeatbloxNotImplemented("Not implemented")


# --------------------------------------------------------------------------------------
#
#  Utility functions
#
# --------------------------------------------------------------------------------------


def pitch_to_note_name(note_num, octave_offset=0):
    """
    Gets note name for a given MIDI pitch

    :param note_num: a midi note number
    :type note_num: int
    :param octave_offset: value that shifts one or more octaves up or down
    :type octave_offset: int
    :return: string representation of note and octave
    :rtype: str
    """
    if not 0 <= note_num <= 127:
        raise BeatbloxValueError("Illegal note number %d" % note_num)
    octave = (note_num // 12) + octave_offset - 1
    pitch = note_num % 12
    return "%s%d" % (constants.PITCHES[pitch], octave)


def decompose_duration(beats, allowed_durations):
    """
    Decomposes a given length into a sum of allowed lengths.
    This function uses a greedy algorithm, which iteratively finds the largest allowed length no longer
    than the remaining length and subtracts it from the remaining length

    :param beats:              Length to be decomposed, in beats.
    :type beats:               Fraction
    :param allowed_durations:  Allowed lengths, in beats.
    :type allowed_durations:   iterable of Fractions
    :return:                   List of decomposed lengths, longest first
    :rtype:                    list of Fraction
    """
    ret_durations = []
    allowed = sorted(set(Fraction(d) for d in allowed_durations if d > 0), reverse=True)
    if len(allowed) == 0:
        raise BeatbloxQuantizationError("No allowed durations to decompose into")
    remainder = Fraction(beats)
    while remainder > 0:
        if remainder < allowed[-1]:
            raise BeatbloxQuantizationError("Illegal note length %s beats" % beats)
        for d in allowed:
            if remainder >= d:
                ret_durations.append(d)
                remainder -= d
                break
    return ret_durations
