import argparse

from beatblox import midi
from beatblox.text import NotationText

"""
Prints the notation of a MIDI file: the named duration of every note and rest, with chords,
tied notes and triplets marked.
"""


def main():
    parser = argparse.ArgumentParser(description="Convert a midi file into notated durations.")
    parser.add_argument('midi_in_file', help='midi filename to import')
    parser.add_argument('-o', '--out_file', help='text filename for output (default: print)')
    parser.add_argument('-p', '--precision', default='32',
                        help='shortest note value to resolve, e.g. 16 or 8. (default 32)')
    parser.add_argument('-t', '--triplets', action="store_true", help='search for triplets')
    parser.add_argument('-u', '--uk', action="store_true", help='use UK duration names (crotchet, quaver)')
    parser.add_argument('-n', '--names', action="store_true", help='print pitch names instead of note numbers')

    args = parser.parse_args()

    print("Reading %s" % args.midi_in_file)
    piece = midi.MIDI().to_piece(args.midi_in_file, precision=args.precision, triplets=args.triplets)

    text = NotationText()
    text.set_options(locale='UK' if args.uk else 'US', pitch_names=args.names)
    if args.out_file:
        print("Writing %s" % args.out_file)
        text.to_file(piece, args.out_file)
    else:
        print(text.to_bin(piece))

    print("\ndone")


if __name__ == '__main__':
    main()
