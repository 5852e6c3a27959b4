"""
Notation tree for a parsed piece.

A track is an ordered sequence of nodes.  Leaves are notes and rests, each carrying a named
duration; chords, tied groups and triplets wrap other nodes.  Every node is immutable.
"""

from dataclasses import dataclass
from fractions import Fraction
from beatblox.errors import *
from beatblox import constants
from beatblox.duration import DurationType


@dataclass(frozen=True)
class Note:
    note_num: int           #: MIDI note number
    duration: DurationType  #: Named duration
    velocity: int = 100     #: MIDI velocity 0-127

    def beat_count(self, beat_type):
        return self.duration.get_beat_count(beat_type)


@dataclass(frozen=True)
class Rest:
    duration: DurationType
    velocity: int = 0

    def beat_count(self, beat_type):
        return self.duration.get_beat_count(beat_type)


@dataclass(frozen=True)
class _Group:
    content: tuple

    def __post_init__(self):
        # Allow any iterable to be passed in, but always store a tuple
        object.__setattr__(self, 'content', tuple(self.content))
        if len(self.content) == 0:
            raise BeatbloxContentError("%s must contain at least one node" % type(self).__name__)

    def __iter__(self):
        return iter(self.content)

    def __len__(self):
        return len(self.content)


class Chord(_Group):
    """ Nodes that start together """

    def beat_count(self, beat_type):
        return max(n.beat_count(beat_type) for n in self.content)


class TiedGroup(_Group):
    """ Same-pitch nodes played back to back as one sound """

    def beat_count(self, beat_type):
        return sum((n.beat_count(beat_type) for n in self.content), Fraction(0))


class Triplet(_Group):
    """
    Three notes in the time of two.  The content is notated with duplet durations, so the
    sounding length is two thirds of the notated total.
    """

    def beat_count(self, beat_type):
        return sum((n.beat_count(beat_type) for n in self.content), Fraction(0)) * Fraction(2, 3)


GROUP_TYPES = (Chord, TiedGroup, Triplet)


@dataclass(frozen=True)
class Track:
    name: str
    notes: tuple

    def __post_init__(self):
        object.__setattr__(self, 'notes', tuple(self.notes))

    def leaves(self):
        """
        All notes and rests in the track, in reading order, with groups flattened
        """
        return [n for _, n in walk(self.notes) if not isinstance(n, GROUP_TYPES)]


@dataclass(frozen=True)
class Piece:
    tempo_bpm: int           #: Initial tempo, in beats per minute
    time_signatures: tuple   #: TimeSignature changes in order of occurrence
    ticks_per_beat: float    #: MIDI ticks in each beat
    tracks: tuple            #: Tracks in file order

    def __post_init__(self):
        object.__setattr__(self, 'time_signatures', tuple(self.time_signatures))
        object.__setattr__(self, 'tracks', tuple(self.tracks))

    @property
    def beat_type(self):
        """
        The beat type used for every duration in the piece.  Only the first time signature is
        honored; later changes are kept in time_signatures but do not affect the durations.
        """
        if len(self.time_signatures) == 0:
            raise BeatbloxTimeSignatureError("Piece has no time signature")
        return self.time_signatures[0].beat_type


def make_leaf(note_num, duration, velocity):
    """
    Builds a Note, or a Rest when note_num is the rest marker.
    """
    if note_num == constants.REST_NOTE_NUM:
        return Rest(duration)
    return Note(note_num, duration, velocity)


def walk(nodes):
    """
    Depth-first traversal of a sequence of nodes, without recursion.

    :param nodes: nodes to traverse
    :type nodes: iterable of notation nodes
    :return: generator of (depth, node) pairs in reading order.  Groups are yielded before their content.
    """
    stack = [(0, n) for n in reversed(tuple(nodes))]
    while stack:
        depth, node = stack.pop()
        yield depth, node
        if isinstance(node, GROUP_TYPES):
            stack.extend((depth + 1, n) for n in reversed(node.content))
