"""
Turns the raw intervals of one track into notation nodes: quantized notes and rests, tied notes
for lengths without a single name, chords for notes that start together, and (optionally) triplets.
"""

import bisect
import collections
import itertools
import logging
from fractions import Fraction
import more_itertools as moreit
from beatblox.base import *
from beatblox.duration import DurationType
from beatblox.notation import Chord, TiedGroup, Triplet, make_leaf
from beatblox.quantize import round_half_up

logger = logging.getLogger(__name__)

# An interval converted to beats
BeatInterval = collections.namedtuple('BeatInterval', ['note_num', 'onset', 'beats', 'velocity'])


def is_rest(interval):
    return interval.note_num == constants.REST_NOTE_NUM


def get_tied_note(note_num, beats, velocity, grid):
    """
    Splits a length with no single note value into a tied group of named lengths, longest first.

    :param note_num: MIDI note number, or the rest marker
    :param beats: quantized length, in beats
    :type beats: Fraction
    :param velocity: velocity for each tied note
    :param grid: quantization grid
    :type grid: BeatGrid
    :return: tied group
    :rtype: TiedGroup
    """
    pieces = decompose_duration(beats, grid.note_lengths)
    notes = []
    for b in pieces:
        duration = DurationType.beat_type_map(b, grid.beat_type)
        if not duration.is_representable:
            raise BeatbloxQuantizationError("No note value for %s beats in tied note" % b)
        notes.append(make_leaf(note_num, duration, velocity))
    return TiedGroup(notes)


def quantize_interval(note_num, beats, velocity, grid):
    """
    Quantizes a length onto the grid and names it, tying notes together when there is no single name.
    """
    quantized = grid.quantize_beats(beats)
    duration = DurationType.beat_type_map(quantized, grid.beat_type)
    if duration.is_representable:
        return make_leaf(note_num, duration, velocity)
    return get_tied_note(note_num, quantized, velocity, grid)


def chord_or_leaf(intervals, grid, length_fn=None):
    """
    Builds one node from intervals that start together: a bare leaf for a single pitch, otherwise
    a chord with one leaf per distinct pitch in input order.  Rests only survive when nothing sounds.
    """
    sounding = [iv for iv in intervals if not is_rest(iv)]
    if len(sounding) == 0:
        sounding = intervals[:1]
    leaves = []
    for iv in moreit.unique_everseen(sounding, key=lambda iv: iv.note_num):
        if length_fn is None:
            leaves.append(quantize_interval(iv.note_num, iv.beats, iv.velocity, grid))
        else:
            leaves.append(make_leaf(iv.note_num, length_fn(iv), iv.velocity))
    if len(leaves) == 1:
        return leaves[0]
    return Chord(leaves)


def group_chords(intervals, grid):
    """
    Collapses intervals whose onsets fall in the same grid cell.

    :param intervals: intervals in onset order
    :type intervals: list of BeatInterval
    :return: list of (position in beats, node)
    """
    ret_val = []
    for slot, members in itertools.groupby(intervals, key=lambda iv: grid.onset_slot(iv.onset)):
        ret_val.append((grid.slot_beats(slot), chord_or_leaf(list(members), grid)))
    return ret_val


def is_triplet_pattern(subdivisions, divisions):
    """
    Decides whether the onsets within one beat look like a triplet: exactly three onsets whose
    inter-onset gaps are roughly equal and longer than a quarter of the beat.

    :param subdivisions: sorted distinct onset subdivisions within the beat
    :type subdivisions: list of int
    :param divisions: number of subdivisions in a beat
    :type divisions: int
    :rtype: bool
    """
    if len(subdivisions) != 3:
        return False
    gaps = [b - a for a, b in moreit.pairwise(subdivisions)]
    return max(gaps) - min(gaps) <= 2 and max(gaps) > divisions / 4


def make_triplet(onsets, grid):
    """
    Renders one beat as a triplet.  Each onset is placed on the nearest third of the beat and
    given the duplet-equivalent duration: a third of a beat is notated as half a beat.

    :param onsets: (subdivision, intervals starting there) for each onset in the beat, in order
    :type onsets: list of tuples
    :return: the triplet, or None unless the onsets land on the first, second and third thirds of the beat
    :rtype: Triplet
    """
    thirds = [round_half_up(Fraction(s * 3, grid.divisions)) for s, _ in onsets] + [3]
    content = []
    for (_, members), start, end in zip(onsets, thirds, thirds[1:]):
        if end <= start:
            return None
        duration = DurationType.beat_type_map(Fraction(end - start, 2), grid.beat_type)
        if not duration.is_representable:
            return None
        content.append(chord_or_leaf(members, grid, length_fn=lambda iv: duration))
    return Triplet(content)


def find_triplets(intervals, grid):
    """
    Scans each beat for triplets, replacing the intervals of every triplet beat with a Triplet node.

    Notes that sound past the end of a triplet beat continue as ordinary notes after it, unless the
    next beat is also a triplet.  Notes that sound into a triplet beat from before are cut at its start.

    :param intervals: intervals in onset order
    :type intervals: list of BeatInterval
    :param grid: quantization grid built with triplet search
    :type grid: BeatGrid
    :return: (list of (position in beats, Triplet), remaining intervals in onset order)
    """
    buckets = collections.defaultdict(list)
    for iv in intervals:
        if not is_rest(iv):
            beat, sub = grid.subdivision(iv.onset)
            buckets[beat].append((sub, iv))

    triplets = {}
    for beat in sorted(buckets):
        by_sub = collections.defaultdict(list)
        for sub, iv in buckets[beat]:
            by_sub[sub].append(iv)
        if not is_triplet_pattern(sorted(by_sub), grid.divisions):
            continue
        triplet = make_triplet(sorted(by_sub.items()), grid)
        if triplet is not None:
            logger.debug("Triplet found at beat %d", beat)
            triplets[beat] = triplet

    if len(triplets) == 0:
        return [], intervals

    triplet_beats = sorted(triplets)
    consumed = set(id(iv) for beat in triplet_beats for _, iv in buckets[beat])
    remaining = []
    for iv in intervals:
        end = iv.onset + iv.beats
        if id(iv) in consumed or (is_rest(iv) and iv.onset // 1 in triplets):
            beat = grid.subdivision(iv.onset)[0] if not is_rest(iv) else int(iv.onset // 1)
            carry = end - (beat + 1)
            if carry < grid.precision_beats or (beat + 1) in triplets:
                continue
            iv = BeatInterval(iv.note_num, Fraction(beat + 1), carry, iv.velocity)
        # Cut intervals that sound into the next triplet beat
        i = bisect.bisect_right(triplet_beats, iv.onset)
        if i < len(triplet_beats) and end > triplet_beats[i]:
            iv = iv._replace(beats=triplet_beats[i] - iv.onset)
        remaining.append(iv)
    remaining.sort(key=lambda iv: iv.onset)
    return [(Fraction(beat), triplets[beat]) for beat in triplet_beats], remaining


def build_track_notes(raw_intervals, grid, triplets=False):
    """
    Builds the notation for one track.

    :param raw_intervals: intervals from the track, in onset order, with times in ticks
    :type raw_intervals: list of RawInterval
    :param grid: quantization grid for the piece
    :type grid: BeatGrid
    :param triplets: if True, search for triplets (more expensive)
    :type triplets: bool
    :return: notation nodes in order
    :rtype: list
    """
    intervals = [BeatInterval(r.note_num, grid.to_beats(r.start_time), grid.to_beats(r.duration), r.velocity)
                 for r in raw_intervals]
    positioned = []
    if triplets:
        positioned, intervals = find_triplets(intervals, grid)
    positioned.extend(group_chords(intervals, grid))
    # Triplets come first in the list so they stay ahead of anything sharing their position
    positioned.sort(key=lambda p: p[0])
    return [node for _, node in positioned]
