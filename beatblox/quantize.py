import math
from fractions import Fraction
from beatblox.errors import *
from beatblox.duration import possible_note_lengths


def round_half_up(value):
    """
    Rounds a Fraction to the nearest integer, with halves going up (round() would go to even)
    """
    return math.floor(value + Fraction(1, 2))


class BeatGrid:
    """
    The quantization grid for one piece.  All positions and lengths handled by the grid are
    Fractions of a beat, so that grid values always classify exactly.
    """

    def __init__(self, precision, beat_type, ticks_per_beat, triplets=False):
        """
        :param precision: shortest duration to resolve
        :type precision: DurationType
        :param beat_type: power-of-two exponent of the time signature denominator
        :type beat_type: int
        :param ticks_per_beat: MIDI ticks in one beat
        :type ticks_per_beat: int or float
        :param triplets: if True, compute the finer grid used to search for triplets
        :type triplets: bool
        """
        if not precision.is_representable:
            raise BeatbloxValueError("Precision must be a nameable duration")
        if ticks_per_beat <= 0:
            raise BeatbloxValueError("Illegal ticks per beat %s" % ticks_per_beat)
        self.precision = precision
        self.beat_type = beat_type
        self.ticks_per_beat = Fraction(ticks_per_beat)
        self.precision_beats = precision.get_beat_count(beat_type)  #: Grid spacing, in beats
        #: Allowed pieces of a tied note, shortest first; the precision itself is always first
        self.note_lengths = possible_note_lengths(beat_type, self.precision_beats)
        #: Subdivisions per beat used by the triplet search (0 when not searching)
        self.divisions = 3 * self.precision_beats.denominator if triplets else 0

    def to_beats(self, ticks):
        return Fraction(ticks) / self.ticks_per_beat

    def quantize_beats(self, beats):
        """
        Snaps a length down to the grid.  Lengths shorter than one grid unit become one unit.

        :param beats: length in beats
        :type beats: Fraction
        :return: quantized length in beats
        :rtype: Fraction
        """
        beats = Fraction(beats)
        if beats < self.precision_beats:
            return self.precision_beats
        return beats - (beats % self.precision_beats)

    def onset_slot(self, beats):
        """
        Index of the grid cell an onset falls in.
        """
        return math.floor(Fraction(beats) / self.precision_beats)

    def slot_beats(self, slot):
        return slot * self.precision_beats

    def subdivision(self, beats):
        """
        Finds the beat and the nearest triplet-search subdivision of that beat for an onset.  An
        onset that rounds up to the end of a beat belongs to subdivision 0 of the next beat.

        :param beats: onset in beats
        :type beats: Fraction
        :return: (beat index, subdivision)
        :rtype: tuple of int
        """
        if self.divisions == 0:
            raise BeatbloxValueError("Grid was not built for triplet search")
        return divmod(round_half_up(Fraction(beats) * self.divisions), self.divisions)

    def __str__(self):
        return "BeatGrid(precision=%s, beats=%s, divisions=%d)" % (self.precision, self.precision_beats,
                                                                   self.divisions)
