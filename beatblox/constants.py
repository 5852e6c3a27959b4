# Constants for beatblox
#

# Note number used for rests in raw intervals.  MIDI note numbers stop at 127.
REST_NOTE_NUM = 255

# Header division values with this bit set are SMPTE frame timing, not ticks per beat
SMPTE_TIMING_BIT = 0x8000

# Time signature beat types are stored as the power-of-two exponent of the denominator,
# so a beat type of 2 is a quarter-note beat.
QUARTER_BEAT_TYPE = 2

PITCHES = ["C", "C#", "D", "D#", "E", "F", "F#", "G", "G#", "A", "A#", "B"]

# Note value strings accepted for configuration, e.g. '8.' is a dotted eighth
NOTE_VALUE_STR = {
    '1': 'whole', '2': 'half', '4': 'quarter', '8': 'eighth',
    '16': 'sixteenth', '32': 'thirtysecond', '64': 'sixtyfourth'
}

DURATION_NAMES = {
    'US': {
        'whole': 'whole note', 'half': 'half note', 'quarter': 'quarter note', 'eighth': 'eighth note',
        'sixteenth': 'sixteenth note', 'thirtysecond': 'thirtysecond note', 'sixtyfourth': 'sixtyfourth note',
        'unrepresentable': 'unknown note'
    },
    'UK': {
        'whole': 'semibreve', 'half': 'minim', 'quarter': 'crotchet', 'eighth': 'quaver',
        'sixteenth': 'semiquaver', 'thirtysecond': 'demisemiquaver', 'sixtyfourth': 'hemidemisemiquaver',
        'unrepresentable': 'unknown note'
    }
}

MODIFIER_NAMES = {'none': '', 'dotted': 'dotted', 'double_dotted': 'double dotted'}
