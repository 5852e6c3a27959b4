import collections
import logging
import mido
from beatblox.base import *
from beatblox.duration import DurationType, DEFAULT_DURATION_PRECISION
from beatblox.grouping import build_track_notes
from beatblox.notation import Piece, Track
from beatblox.quantize import BeatGrid

logger = logging.getLogger(__name__)

# What one channel is doing while a track is read.  note_num is None when nothing sounds.
ChannelState = collections.namedtuple('ChannelState', ['note_num', 'velocity', 'onset', 'last_offset'])
SILENT_CHANNEL = ChannelState(None, 0, 0, 0)


def get_ticks_per_beat(midi_file):
    """
    Gets the number of ticks in each beat from the file header.  Only metrical timing is supported;
    SMPTE frame timing aborts the parse.

    :param midi_file: decoded midi file
    :type midi_file: mido.MidiFile
    :return: ticks per beat
    :rtype: float
    """
    ticks_per_beat = int(midi_file.ticks_per_beat)
    # mido reads the header division as a signed value, so SMPTE timing shows up as negative
    if ticks_per_beat <= 0 or ticks_per_beat & constants.SMPTE_TIMING_BIT:
        raise BeatbloxTimingError("Timing format not supported (header division %d)" % ticks_per_beat)
    return float(ticks_per_beat)


def get_bpm(meta_track):
    """
    Gets the initial tempo from the first tempo event.

    :param meta_track: first track of the file
    :type meta_track: mido.MidiTrack
    :return: tempo in beats per minute, truncated; 0 if there is no tempo event
    :rtype: int
    """
    msg = next((msg for msg in meta_track if msg.type == 'set_tempo'), None)
    if msg is None:
        return 0
    return int(mido.tempo2bpm(msg.tempo))


def get_time_signatures(meta_track):
    """
    Returns all time signatures in the track, each with the tick at which it occurs.

    :param meta_track: first track of the file
    :type meta_track: mido.MidiTrack
    :rtype: list of TimeSignature
    """
    time_signatures = []
    current_time = 0
    for msg in meta_track:
        current_time += msg.time
        if msg.type == 'time_signature':
            # mido gives the denominator itself; store its power-of-two exponent
            beat_type = msg.denominator.bit_length() - 1
            time_signatures.append(TimeSignature(msg.numerator, beat_type, current_time))
    return time_signatures


def get_track_name(midi_track):
    """
    Gets the name of a track: its instrument name if it has one, otherwise its track name.
    """
    for msg_type in ('instrument_name', 'track_name'):
        name_msg = next((msg for msg in midi_track if msg.type == msg_type), None)
        if name_msg is not None and len(name_msg.name.strip()) > 0:
            return name_msg.name.strip()
    return ''


def get_raw_intervals(midi_track):
    """
    Reads the notes of a track as intervals, adding a rest interval for every silence between notes.

    Each channel is read as a single voice: a note_on while another note sounds on the same channel
    is ignored, and a note only ends with a note_off (or a note_on with velocity 0) for its own pitch.
    Notes still sounding at the end of the track are dropped.

    :param midi_track: track to read
    :type midi_track: mido.MidiTrack
    :return: intervals sorted by start time, then channel
    :rtype: list of RawInterval
    """
    current_time = 0
    states = {}
    intervals = []
    for msg in midi_track:
        current_time += msg.time
        if msg.type not in ('note_on', 'note_off'):
            continue
        state = states.get(msg.channel, SILENT_CHANNEL)
        if msg.type == 'note_on' and msg.velocity > 0:
            if state.note_num is not None:
                logger.debug("Ignoring note %d on channel %d at tick %d: note %d still sounding",
                             msg.note, msg.channel, current_time, state.note_num)
                continue
            gap = current_time - state.last_offset
            if gap > 0:
                intervals.append(RawInterval(constants.REST_NOTE_NUM, state.last_offset, gap, 0, msg.channel))
            states[msg.channel] = ChannelState(msg.note, msg.velocity, current_time, state.last_offset)
        # Some MIDI devices use a note_on with velocity of 0 to turn notes off.
        elif state.note_num == msg.note:
            duration = current_time - state.onset
            if duration > 0:
                intervals.append(RawInterval(msg.note, state.onset, duration, state.velocity, msg.channel))
            else:
                logger.debug("Dropping zero-length note %d at tick %d", msg.note, current_time)
            states[msg.channel] = SILENT_CHANNEL._replace(last_offset=current_time)

    for channel, state in states.items():
        if state.note_num is not None:
            logger.warning("Note %d on channel %d started at tick %d never ends; dropped",
                           state.note_num, channel, state.onset)

    intervals.sort(key=lambda r: (r.start_time, r.channel))
    return intervals


class MIDI(BeatbloxIO):
    """
    Import MIDI files as notated pieces.

    The `mido`_ library decodes the MIDI file; this class reads the decoded tracks, quantizes the
    notes and names their durations.

    .. _mido: https://mido.readthedocs.io/en/latest/
    """
    def __init__(self):
        BeatbloxIO.__init__(self)

    @property
    def precision(self):
        """
        The quantization precision option as a DurationType
        """
        precision = self.get_option('precision', DEFAULT_DURATION_PRECISION)
        if isinstance(precision, DurationType):
            return precision
        if isinstance(precision, (int, str)):
            return DurationType.from_string(str(precision))
        raise BeatbloxTypeError("Unrecognized precision %r" % (precision,))

    def to_piece(self, filename, **kwargs):
        """
        Import a midi file

        :param filename: filename to import
        :type filename: str
        :return: notated piece
        :rtype: Piece
        :keyword options:
            * **precision** (DurationType or str) shortest duration to resolve, e.g. '16' or '8.'
              (default thirty-second note)
            * **triplets** (bool) search for triplets (default False)
        """
        self.set_options(**kwargs)
        return self.import_midi_to_piece(mido.MidiFile(filename))

    def import_midi_to_piece(self, in_midi, **kwargs):
        """
        Build a piece from an already decoded MIDI file.  Track 0 supplies the tempo and time
        signatures; every track, track 0 included, becomes a track of the piece.

        :param in_midi: decoded midi file
        :type in_midi: mido.MidiFile
        :return: notated piece
        :rtype: Piece
        """
        self.set_options(**kwargs)
        if len(in_midi.tracks) == 0:
            raise BeatbloxContentError("No tracks in MIDI file")
        meta_track = in_midi.tracks[0]
        ticks_per_beat = get_ticks_per_beat(in_midi)
        time_signatures = get_time_signatures(meta_track)
        if len(time_signatures) == 0:
            raise BeatbloxTimeSignatureError("No time signature in MIDI file; cannot measure beats")
        if any(ts.beat_type != time_signatures[0].beat_type for ts in time_signatures[1:]):
            logger.info("Beat type changes after %s are not applied", time_signatures[0])

        triplets = bool(self.get_option('triplets', False))
        grid = BeatGrid(self.precision, time_signatures[0].beat_type, ticks_per_beat, triplets)
        tracks = [self.midi_track_to_track(t, grid, triplets) for t in in_midi.tracks]
        return Piece(get_bpm(meta_track), time_signatures, ticks_per_beat, tracks)

    def midi_track_to_track(self, midi_track, grid, triplets=False):
        """
        Convert one MIDI track into a notated track.

        :param midi_track: midi track
        :type midi_track: mido.MidiTrack
        :param grid: quantization grid for the piece
        :type grid: BeatGrid
        :param triplets: search for triplets
        :type triplets: bool
        :rtype: Track
        """
        intervals = get_raw_intervals(midi_track)
        return Track(get_track_name(midi_track), build_track_notes(intervals, grid, triplets))
