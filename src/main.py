# Command line entry point: build a bracket from a YAML roster and print it

import argparse
import os
import sys

import yaml

from bracket.double_elimination import describe_round
from bracket.errors import BracketError
from bracket.models import Format, Section
from bracket.roster import Roster
from bracket.seeding import identity_order, random_order
from bracket.tournament import create_tournament

SECTION_TITLES = {
    Section.WINNERS: 'Winners Bracket',
    Section.LOSERS: 'Losers Bracket',
    Section.GRAND_FINAL: 'Grand Final',
}


def load_roster(file_path):
    """Load entrant names from YAML: a plain list or a mapping with an 'entrants' list."""
    with open(file_path, mode='r', encoding='utf-8') as file:
        data = yaml.safe_load(file) or []
    if isinstance(data, dict):
        data = data.get('entrants', [])
    roster = Roster()
    for item in data:
        name = item.get('name') if isinstance(item, dict) else item
        roster.add(str(name))
    return roster


def format_slot(entrant):
    return entrant.display_name if entrant else 'TBD'


def print_bracket(tournament):
    print(f"# {tournament.name} ({tournament.format.value} elimination, {len(tournament.entrants)} entrants)")
    current = None
    for match in tournament.matches:
        heading = (match.section, match.round)
        if heading != current:
            if current is None or current[0] is not match.section:
                print(f"\n== {SECTION_TITLES[match.section]} ==")
            print(f"-- {describe_round(match, tournament.matches)} --")
            current = heading
        line = f"  {match.id}: {format_slot(match.slot_a)} vs {format_slot(match.slot_b)}"
        if match.winner:
            line += f"  -> {match.winner.display_name}"
        print(line)


def main(argv=None):
    script_dir = os.path.dirname(__file__)
    base_dir = os.path.dirname(script_dir)

    parser = argparse.ArgumentParser(description='Build an elimination bracket from a roster file.')
    parser.add_argument('roster', nargs='?', default=os.path.join(base_dir, 'data', 'roster.yaml'),
                        help='YAML roster file (default: data/roster.yaml)')
    parser.add_argument('--name', default='Action Ladder Tournament', help='Tournament name')
    parser.add_argument('--format', choices=[f.value for f in Format], default=Format.SINGLE.value)
    parser.add_argument('--keep-order', action='store_true',
                        help='Seed in roster order instead of shuffling')
    args = parser.parse_args(argv)

    try:
        roster = load_roster(args.roster)
        tournament = create_tournament(
            roster.snapshot(),
            name=args.name,
            format=Format(args.format),
            order=identity_order if args.keep_order else random_order,
        )
    except FileNotFoundError:
        print(f"Error: roster file not found: {args.roster}", file=sys.stderr)
        return 1
    except (BracketError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print_bracket(tournament)
    return 0


if __name__ == '__main__':
    sys.exit(main())
