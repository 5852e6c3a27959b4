import os
import tempfile
import unittest
import mido

from beatblox import constants
from beatblox import midi
from beatblox import testing_tools
from beatblox.base import RawInterval, TimeSignature
from beatblox.duration import DurationType, NoteDuration, NoteDurationModifier
from beatblox.errors import *
from beatblox.notation import Chord, Note, Rest, TiedGroup

QUARTER = DurationType(NoteDuration.QUARTER)
EIGHTH = DurationType(NoteDuration.EIGHTH)
WHOLE = DurationType(NoteDuration.WHOLE)


def raw_track(*messages):
    return mido.MidiTrack(messages)


class MidiHeaderTestCase(unittest.TestCase):
    def test_ticks_per_beat(self):
        midi_file = mido.MidiFile(ticks_per_beat=96)
        self.assertEqual(midi.get_ticks_per_beat(midi_file), 96.0)

        for division in (-25, 0, 0xE728):
            midi_file.ticks_per_beat = division
            with self.assertRaises(BeatbloxTimingError):
                midi.get_ticks_per_beat(midi_file)

    def test_bpm(self):
        for tempo, bpm in ((500000, 120), (600000, 100), (700000, 85), (1000000, 60)):
            track = raw_track(mido.MetaMessage('set_tempo', tempo=tempo, time=0))
            self.assertEqual(midi.get_bpm(track), bpm)
        self.assertEqual(midi.get_bpm(raw_track()), 0)

        # Only the first tempo counts
        track = raw_track(mido.MetaMessage('set_tempo', tempo=500000, time=0),
                          mido.MetaMessage('set_tempo', tempo=1000000, time=960))
        self.assertEqual(midi.get_bpm(track), 120)

    def test_time_signatures(self):
        midi_file = testing_tools.make_midi_file([], time_signatures=((0, 4, 4), (1920, 3, 8), (2880, 2, 2)))
        time_signatures = midi.get_time_signatures(midi_file.tracks[0])
        self.assertEqual(time_signatures, [TimeSignature(4, 2, 0), TimeSignature(3, 3, 1920),
                                           TimeSignature(2, 1, 2880)])
        self.assertEqual(time_signatures[1].denominator, 8)

    def test_track_name(self):
        track = raw_track(mido.MetaMessage('track_name', name='Right hand', time=0),
                          mido.MetaMessage('instrument_name', name='Piano', time=0))
        self.assertEqual(midi.get_track_name(track), 'Piano')
        track = raw_track(mido.MetaMessage('track_name', name='Right hand', time=0))
        self.assertEqual(midi.get_track_name(track), 'Right hand')
        self.assertEqual(midi.get_track_name(raw_track()), '')


class RawIntervalTestCase(unittest.TestCase):
    def test_rest_synthesis(self):
        midi_file = testing_tools.make_midi_file([[(0, 60, 40, 100), (100, 62, 10, 90)]], ticks_per_beat=10)
        intervals = midi.get_raw_intervals(midi_file.tracks[1])
        self.assertEqual(intervals, [RawInterval(60, 0, 40, 100, 0),
                                     RawInterval(constants.REST_NOTE_NUM, 40, 60, 0, 0),
                                     RawInterval(62, 100, 10, 90, 0)])

    def test_leading_rest(self):
        midi_file = testing_tools.make_midi_file([[(240, 60, 240, 100)]])
        intervals = midi.get_raw_intervals(midi_file.tracks[1])
        self.assertEqual(intervals, [RawInterval(constants.REST_NOTE_NUM, 0, 240, 0, 0),
                                     RawInterval(60, 240, 240, 100, 0)])

    def test_overlap_ignored(self):
        track = raw_track(mido.Message('note_on', note=60, velocity=100, time=0),
                          mido.Message('note_on', note=62, velocity=100, time=240),
                          mido.Message('note_off', note=60, velocity=0, time=240),
                          mido.Message('note_off', note=62, velocity=0, time=240))
        with self.assertLogs('beatblox.midi', level='DEBUG'):
            intervals = midi.get_raw_intervals(track)
        self.assertEqual(intervals, [RawInterval(60, 0, 480, 100, 0)])

    def test_velocity_zero_note_off(self):
        track = raw_track(mido.Message('note_on', note=60, velocity=100, time=0),
                          mido.Message('note_on', note=60, velocity=0, time=480),
                          mido.Message('note_on', note=62, velocity=90, time=0),
                          mido.Message('note_off', note=62, velocity=64, time=480))
        intervals = midi.get_raw_intervals(track)
        self.assertEqual(intervals, [RawInterval(60, 0, 480, 100, 0), RawInterval(62, 480, 480, 90, 0)])

    def test_zero_length_dropped(self):
        track = raw_track(mido.Message('note_on', note=60, velocity=100, time=0),
                          mido.Message('note_off', note=60, velocity=0, time=0),
                          mido.Message('note_on', note=62, velocity=100, time=480),
                          mido.Message('note_off', note=62, velocity=0, time=480))
        intervals = midi.get_raw_intervals(track)
        self.assertEqual(intervals, [RawInterval(constants.REST_NOTE_NUM, 0, 480, 0, 0),
                                     RawInterval(62, 480, 480, 100, 0)])

    def test_unterminated_note(self):
        track = raw_track(mido.Message('note_on', note=60, velocity=100, time=0),
                          mido.Message('note_off', note=60, velocity=0, time=480),
                          mido.Message('note_on', note=62, velocity=100, time=0))
        with self.assertLogs('beatblox.midi', level='WARNING'):
            intervals = midi.get_raw_intervals(track)
        self.assertEqual(intervals, [RawInterval(60, 0, 480, 100, 0)])

    def test_channels(self):
        midi_file = testing_tools.make_midi_file([[(0, 60, 480, 100, 0), (0, 64, 480, 80, 1),
                                                   (480, 62, 480, 100, 0), (720, 67, 240, 80, 1)]])
        intervals = midi.get_raw_intervals(midi_file.tracks[1])
        self.assertEqual(intervals, [RawInterval(60, 0, 480, 100, 0),
                                     RawInterval(64, 0, 480, 80, 1),
                                     RawInterval(62, 480, 480, 100, 0),
                                     RawInterval(constants.REST_NOTE_NUM, 480, 240, 0, 1),
                                     RawInterval(67, 720, 240, 80, 1)])


class MidiImportTestCase(unittest.TestCase):
    def test_import(self):
        midi_file = testing_tools.make_midi_file([[(0, 60, 40, 100), (100, 62, 10, 90)]], ticks_per_beat=10)
        piece = midi.MIDI().import_midi_to_piece(midi_file)
        self.assertEqual(piece.tempo_bpm, 120)
        self.assertEqual(piece.ticks_per_beat, 10.0)
        self.assertEqual(piece.time_signatures, (TimeSignature(4, 2, 0),))
        self.assertEqual(len(piece.tracks), 2)

        self.assertEqual(piece.tracks[0].name, '')
        self.assertEqual(piece.tracks[0].notes, ())
        track = piece.tracks[1]
        self.assertEqual(track.name, 'Track 1')
        # The 60 tick silence is six beats long
        self.assertEqual(track.notes, (Note(60, WHOLE, 100),
                                       Rest(DurationType(NoteDuration.WHOLE, NoteDurationModifier.DOTTED)),
                                       Note(62, QUARTER, 90)))

    def test_chords_and_ties(self):
        midi_file = testing_tools.make_midi_file([[(0, 60, 480, 100, 0), (0, 64, 480, 100, 1),
                                                   (480, 62, 2400, 100, 0)]])
        piece = midi.MIDI().import_midi_to_piece(midi_file)
        notes = piece.tracks[1].notes
        self.assertEqual(notes[0], Chord([Note(60, QUARTER), Note(64, QUARTER)]))
        self.assertEqual(notes[1], TiedGroup([Note(62, WHOLE), Note(62, QUARTER)]))
        self.assertEqual(len(notes), 2)
        self.assertEqual(piece.tracks[1].leaves(), [Note(60, QUARTER), Note(64, QUARTER),
                                                    Note(62, WHOLE), Note(62, QUARTER)])

    def test_rests_per_channel(self):
        """
        A rest on one channel is kept even while another channel is sounding
        """
        midi_file = testing_tools.make_midi_file([[(0, 60, 960, 100, 0), (0, 64, 240, 100, 1),
                                                   (720, 67, 240, 100, 1)]])
        piece = midi.MIDI().import_midi_to_piece(midi_file)
        half = DurationType(NoteDuration.HALF)
        self.assertEqual(piece.tracks[1].notes, (Chord([Note(60, half), Note(64, EIGHTH)]),
                                                 Rest(QUARTER),
                                                 Note(67, EIGHTH)))

    def test_eighth_note_beat(self):
        midi_file = testing_tools.make_midi_file([[(0, 60, 480, 100), (480, 62, 960, 100)]],
                                                 time_signatures=((0, 6, 8),))
        piece = midi.MIDI().import_midi_to_piece(midi_file)
        self.assertEqual(piece.beat_type, 3)
        self.assertEqual(piece.tracks[1].notes, (Note(60, EIGHTH), Note(62, QUARTER)))

    def test_precision(self):
        midi_file = testing_tools.make_midi_file([[(0, 60, 60, 100)]])
        piece = midi.MIDI().import_midi_to_piece(midi_file)
        self.assertEqual(piece.tracks[1].notes, (Note(60, DurationType(NoteDuration.THIRTYSECOND)),))

        piece = midi.MIDI().import_midi_to_piece(midi_file, precision='16')
        self.assertEqual(piece.tracks[1].notes, (Note(60, DurationType(NoteDuration.SIXTEENTH)),))

        importer = midi.MIDI()
        importer.set_options(precision=8)
        self.assertEqual(importer.precision, EIGHTH)
        importer.set_options(precision=EIGHTH)
        self.assertEqual(importer.precision, EIGHTH)
        importer.set_options(precision=0.5)
        with self.assertRaises(BeatbloxTypeError):
            importer.precision
        importer.set_options(precision='3')
        with self.assertRaises(BeatbloxValueError):
            importer.import_midi_to_piece(midi_file)

    def test_triplets(self):
        midi_file = testing_tools.make_midi_file([[(0, 60, 160, 100), (160, 62, 160, 100), (320, 64, 160, 100)]])
        piece = midi.MIDI().import_midi_to_piece(midi_file, triplets=True)
        self.assertEqual(len(piece.tracks[1].notes), 1)
        triplet = piece.tracks[1].notes[0]
        self.assertEqual([n.duration for n in triplet], [EIGHTH] * 3)

    def test_errors(self):
        midi_file = testing_tools.make_midi_file([[(0, 60, 480, 100)]], time_signatures=())
        with self.assertRaises(BeatbloxTimeSignatureError):
            midi.MIDI().import_midi_to_piece(midi_file)
        with self.assertRaises(BeatbloxContentError):
            midi.MIDI().import_midi_to_piece(midi_file)

        with self.assertRaises(BeatbloxContentError):
            midi.MIDI().import_midi_to_piece(mido.MidiFile())

        midi_file = testing_tools.make_midi_file([[(0, 60, 480, 100)]])
        midi_file.ticks_per_beat = 0xE728
        with self.assertRaises(BeatbloxTimingError):
            midi.MIDI().import_midi_to_piece(midi_file)

    def test_time_signature_change(self):
        midi_file = testing_tools.make_midi_file([[(0, 60, 480, 100)]], time_signatures=((0, 4, 4), (1920, 6, 8)))
        with self.assertLogs('beatblox.midi', level='INFO'):
            piece = midi.MIDI().import_midi_to_piece(midi_file)
        self.assertEqual(piece.beat_type, 2)
        self.assertEqual(len(piece.time_signatures), 2)

    def test_to_piece(self):
        midi_file = testing_tools.make_midi_file([[(0, 60, 480, 100)]])
        with tempfile.TemporaryDirectory() as tmp_dir:
            filename = os.path.join(tmp_dir, 'test.mid')
            midi_file.save(filename)
            piece = midi.MIDI().to_piece(filename)
        self.assertEqual(piece.tracks[1].notes, (Note(60, QUARTER),))


if __name__ == '__main__':
    unittest.main(failfast=False)
