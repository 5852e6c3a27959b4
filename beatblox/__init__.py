
from .duration import DurationType, NoteDuration, NoteDurationModifier, DEFAULT_DURATION_PRECISION
from .notation import Note, Rest, Chord, TiedGroup, Triplet, Track, Piece
from .midi import MIDI
from .text import NotationText
