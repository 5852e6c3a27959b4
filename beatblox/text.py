from beatblox.base import *
from beatblox.notation import Chord, Note, Rest, TiedGroup, Triplet, GROUP_TYPES

# Opening and closing banners for each kind of group
BANNERS = {
    TiedGroup: ('====Tied Notes====', '=================='),
    Chord: ('++++++Chord+++++++', '++++++++++++++++++'),
    Triplet: ('-----Triplet------', '------------------'),
}


class NotationText(BeatbloxIO):
    """
    Renders a piece as plain text, one line per note or rest, with each chord, tied group and
    triplet wrapped in its own banner.
    """
    def __init__(self):
        BeatbloxIO.__init__(self)
        self.set_options(locale='US', pitch_names=False)

    def to_bin(self, piece, **kwargs):
        """
        Exports a piece to text

        :param piece: piece to export
        :type piece: Piece
        :return: text
        :rtype: str

        :keyword options:
            * **locale** (str) - 'US' (quarter note) or 'UK' (crotchet) duration names
            * **pitch_names** (bool) - print note names such as C4 instead of MIDI note numbers
        """
        self.set_options(**kwargs)
        lines = ["BPM: %d" % piece.tempo_bpm]
        for track in piece.tracks:
            lines.append("=============== %s ===============" % track.name)
            lines.extend(self.nodes_to_lines(track.notes))
        return '\n'.join(lines) + '\n'

    def to_file(self, piece, filename, **kwargs):
        """
        Exports a piece to a text file

        :param piece: piece to export
        :type piece: Piece
        :param filename: output filename
        :type filename: str
        """
        with open(filename, 'w') as f:
            f.write(self.to_bin(piece, **kwargs))
        return True

    def nodes_to_lines(self, nodes):
        """
        Renders nodes in order.  Groups are expanded with an explicit stack, so nesting depth is not
        limited by the recursion limit.
        """
        lines = []
        stack = list(reversed(tuple(nodes)))
        while stack:
            item = stack.pop()
            if isinstance(item, str):
                lines.append(item)
            elif isinstance(item, GROUP_TYPES):
                opening, closing = BANNERS[type(item)]
                lines.append(opening)
                stack.append(closing)
                stack.extend(reversed(item.content))
            else:
                lines.append(self.leaf_to_text(item))
        return lines

    def duration_name(self, duration):
        return duration.to_name(self.get_option('locale', 'US'))

    def leaf_to_text(self, leaf):
        if isinstance(leaf, Rest):
            return "Rest | Duration: %s" % self.duration_name(leaf.duration)
        if isinstance(leaf, Note):
            if self.get_option('pitch_names', False):
                pitch = pitch_to_note_name(leaf.note_num)
            else:
                pitch = "%d" % leaf.note_num
            return "Note: %s | Duration: %s | Velocity: %d" % (pitch, self.duration_name(leaf.duration),
                                                               leaf.velocity)
        raise BeatbloxTypeError("Cannot render %s" % type(leaf).__name__)
