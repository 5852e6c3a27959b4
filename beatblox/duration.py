from enum import Enum
from dataclasses import dataclass
from fractions import Fraction
from beatblox.errors import *
from beatblox import constants


class NoteDuration(Enum):
    """
    Base note values.  UNREPRESENTABLE marks a length that has no single note value.
    """
    WHOLE = 'whole'
    HALF = 'half'
    QUARTER = 'quarter'
    EIGHTH = 'eighth'
    SIXTEENTH = 'sixteenth'
    THIRTYSECOND = 'thirtysecond'
    SIXTYFOURTH = 'sixtyfourth'
    UNREPRESENTABLE = 'unrepresentable'


class NoteDurationModifier(Enum):
    """
    Modifiers that may be added onto a note duration.
    """
    NONE = 'none'
    DOTTED = 'dotted'
    DOUBLE_DOTTED = 'double_dotted'


# Lengths of the base note values, in sixty-fourth notes
BASE_SCALED_VALUES = {
    NoteDuration.WHOLE: 64, NoteDuration.HALF: 32, NoteDuration.QUARTER: 16, NoteDuration.EIGHTH: 8,
    NoteDuration.SIXTEENTH: 4, NoteDuration.THIRTYSECOND: 2, NoteDuration.SIXTYFOURTH: 1,
}

MODIFIER_FACTORS = {
    NoteDurationModifier.NONE: Fraction(1, 1),
    NoteDurationModifier.DOTTED: Fraction(3, 2),
    NoteDurationModifier.DOUBLE_DOTTED: Fraction(7, 4),
}

# Every nameable length, in sixty-fourth notes.  Keys are compared by exact equality.
SCALED_DURATIONS = {
    112.0: (NoteDuration.WHOLE, NoteDurationModifier.DOUBLE_DOTTED),
    96.0: (NoteDuration.WHOLE, NoteDurationModifier.DOTTED),
    64.0: (NoteDuration.WHOLE, NoteDurationModifier.NONE),
    56.0: (NoteDuration.HALF, NoteDurationModifier.DOUBLE_DOTTED),
    48.0: (NoteDuration.HALF, NoteDurationModifier.DOTTED),
    32.0: (NoteDuration.HALF, NoteDurationModifier.NONE),
    28.0: (NoteDuration.QUARTER, NoteDurationModifier.DOUBLE_DOTTED),
    24.0: (NoteDuration.QUARTER, NoteDurationModifier.DOTTED),
    16.0: (NoteDuration.QUARTER, NoteDurationModifier.NONE),
    14.0: (NoteDuration.EIGHTH, NoteDurationModifier.DOUBLE_DOTTED),
    12.0: (NoteDuration.EIGHTH, NoteDurationModifier.DOTTED),
    8.0: (NoteDuration.EIGHTH, NoteDurationModifier.NONE),
    7.0: (NoteDuration.SIXTEENTH, NoteDurationModifier.DOUBLE_DOTTED),
    6.0: (NoteDuration.SIXTEENTH, NoteDurationModifier.DOTTED),
    4.0: (NoteDuration.SIXTEENTH, NoteDurationModifier.NONE),
    3.5: (NoteDuration.THIRTYSECOND, NoteDurationModifier.DOUBLE_DOTTED),
    3.0: (NoteDuration.THIRTYSECOND, NoteDurationModifier.DOTTED),
    2.0: (NoteDuration.THIRTYSECOND, NoteDurationModifier.NONE),
    1.75: (NoteDuration.SIXTYFOURTH, NoteDurationModifier.DOUBLE_DOTTED),
    1.5: (NoteDuration.SIXTYFOURTH, NoteDurationModifier.DOTTED),
    1.0: (NoteDuration.SIXTYFOURTH, NoteDurationModifier.NONE),
}

# Beat lengths of all possible note durations when the beat is a quarter note
POSSIBLE_NOTE_LENGTHS = [
    0.0625, 0.09375, 0.109375, 0.125, 0.1875, 0.21875,
    0.25, 0.375, 0.4375, 0.5, 0.75, 0.875, 1.0, 1.5,
    1.75, 2.0, 3.0, 3.5, 4.0, 6.0, 7.0
]


def sixty_fourths_per_beat(beat_type):
    """
    Number of sixty-fourth notes in one beat

    :param beat_type: power-of-two exponent of the time signature denominator (2 for quarter notes)
    :type beat_type: int
    :rtype: Fraction
    """
    return Fraction(64) / Fraction(2) ** beat_type


def possible_note_lengths(beat_type, precision_beats=None):
    """
    Gets the beat lengths of every nameable duration for a beat type, shortest first.  When a
    precision is given, only lengths that are whole multiples of it are returned.

    :param beat_type: power-of-two exponent of the time signature denominator
    :type beat_type: int
    :param precision_beats: quantization unit, in beats
    :type precision_beats: Fraction
    :return: ascending list of lengths in beats
    :rtype: list of Fraction
    """
    factor = Fraction(2) ** (beat_type - constants.QUARTER_BEAT_TYPE)
    lengths = [Fraction(b) * factor for b in POSSIBLE_NOTE_LENGTHS]
    if precision_beats is not None:
        lengths = [b for b in lengths if b % precision_beats == 0]
    return lengths


@dataclass(frozen=True)
class DurationType:
    duration: NoteDuration
    modifier: NoteDurationModifier = NoteDurationModifier.NONE

    @classmethod
    def beat_type_map(cls, beats, beat_type):
        """
        Maps a number of beats to a DurationType.  Lengths with no name map to UNREPRESENTABLE.

        :param beats: length in beats
        :type beats: float or Fraction
        :param beat_type: power-of-two exponent of the time signature denominator (2 for quarter notes)
        :type beat_type: int
        :return: duration
        :rtype: DurationType
        """
        scaled = Fraction(beats) * sixty_fourths_per_beat(beat_type)
        duration, modifier = SCALED_DURATIONS.get(scaled, (NoteDuration.UNREPRESENTABLE, NoteDurationModifier.NONE))
        return cls(duration, modifier)

    @classmethod
    def from_string(cls, note_value):
        """
        Parses a note value such as '4', '8.' (dotted eighth) or '16..' (double dotted sixteenth).

        :param note_value: note value string
        :type note_value: str
        :rtype: DurationType
        """
        name = note_value.strip()
        modifier = NoteDurationModifier.NONE
        if name.endswith('..'):
            modifier = NoteDurationModifier.DOUBLE_DOTTED
            name = name[:-2]
        elif name.endswith('.'):
            modifier = NoteDurationModifier.DOTTED
            name = name[:-1]
        if name not in constants.NOTE_VALUE_STR:
            raise BeatbloxValueError('Unrecognized note value "%s"' % note_value)
        return cls(NoteDuration(constants.NOTE_VALUE_STR[name]), modifier)

    @property
    def is_representable(self):
        return self.duration != NoteDuration.UNREPRESENTABLE

    def get_beat_count(self, beat_type):
        """
        Returns the number of beats in this duration for the given beat type.

        :param beat_type: power-of-two exponent of the time signature denominator
        :type beat_type: int
        :rtype: Fraction
        """
        if not self.is_representable:
            return Fraction(0)
        scaled = BASE_SCALED_VALUES[self.duration] * MODIFIER_FACTORS[self.modifier]
        return scaled / sixty_fourths_per_beat(beat_type)

    def quantize(self, beat_type, precision_beats):
        """
        Snaps this duration down onto the precision grid.  Durations shorter than the
        precision become the precision.
        """
        beats = self.get_beat_count(beat_type)
        if beats < precision_beats:
            return self.beat_type_map(precision_beats, beat_type)
        quantized_beats = beats - (beats % precision_beats)
        return self.beat_type_map(quantized_beats, beat_type)

    def to_name(self, locale='US'):
        """
        Human readable name, e.g. 'dotted eighth note' or, for the UK locale, 'dotted quaver'
        """
        names = constants.DURATION_NAMES[locale.upper()]
        mod_str = constants.MODIFIER_NAMES[self.modifier.value]
        return ' '.join(s for s in (mod_str, names[self.duration.value]) if s)

    def __str__(self):
        return self.to_name()


DEFAULT_DURATION_PRECISION = DurationType(NoteDuration.THIRTYSECOND, NoteDurationModifier.NONE)
