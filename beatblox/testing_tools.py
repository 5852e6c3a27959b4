import mido


def sort_midi_events(msg):
    if msg.type == 'note_off':
        return (msg.time, 9)
    elif msg.type == 'note_on':
        return (msg.time, 10)
    elif msg.type in ('track_name', 'instrument_name'):
        return (msg.time, 0)
    else:
        return (msg.time, 7)


def to_delta_times(events):
    """
    Sorts messages stamped with absolute times and turns them into a track with delta times.
    """
    midi_track = mido.MidiTrack()
    # Because 'note_off' comes before 'note_on' this sort will keep note_off events before
    # note_on events.
    events.sort(key=sort_midi_events)
    last_time = 0
    for msg in events:
        current_time = msg.time
        msg.time -= last_time
        midi_track.append(msg)
        last_time = current_time
    return midi_track


def notes_to_midi_track(notes, name=None, channel=0):
    """
    Makes a midi track from notes.

    :param notes: (start tick, note number, duration in ticks, velocity) or, to override the
        channel, (start tick, note number, duration in ticks, velocity, channel)
    :type notes: list of tuples
    :param name: track name
    :type name: str
    :param channel: default midi channel
    :type channel: int
    :rtype: mido.MidiTrack
    """
    events = []
    if name is not None:
        events.append(mido.MetaMessage('track_name', name=name, time=0))
    for n in notes:
        start, note_num, duration, velocity = n[:4]
        ch = n[4] if len(n) > 4 else channel
        events.append(mido.Message('note_on', note=note_num, channel=ch, velocity=velocity, time=start))
        events.append(mido.Message('note_off', note=note_num, channel=ch, velocity=0, time=start + duration))
    return to_delta_times(events)


def make_midi_file(note_tracks, ticks_per_beat=480, time_signatures=((0, 4, 4),), tempo=500000):
    """
    Makes a type 1 midi file in memory.  Track 0 holds the tempo and time signatures; each entry
    of note_tracks becomes one more track named 'Track n'.

    :param note_tracks: note lists as taken by notes_to_midi_track
    :type note_tracks: list of lists
    :param ticks_per_beat: header division
    :type ticks_per_beat: int
    :param time_signatures: (tick, numerator, denominator) for each time signature
    :type time_signatures: tuple of tuples
    :param tempo: microseconds per beat, or None for no tempo event
    :type tempo: int
    :rtype: mido.MidiFile
    """
    midi_file = mido.MidiFile(ticks_per_beat=ticks_per_beat)
    events = []
    if tempo is not None:
        events.append(mido.MetaMessage('set_tempo', tempo=tempo, time=0))
    for t, numerator, denominator in time_signatures:
        events.append(mido.MetaMessage('time_signature', numerator=numerator, denominator=denominator, time=t))
    midi_file.tracks.append(to_delta_times(events))
    for i, notes in enumerate(note_tracks):
        midi_file.tracks.append(notes_to_midi_track(notes, name='Track %d' % (i + 1)))
    return midi_file
