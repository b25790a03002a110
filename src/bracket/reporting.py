"""
Result rows for league rating reports.

Rows are produced for decided matches between two real entrants; byes are
never reported.
"""
import csv
from dataclasses import asdict, dataclass, fields
from typing import Dict, IO, Iterable, List, Optional, Union

from .models import Match, Tournament

Score = Union[int, str]


@dataclass(frozen=True)
class ReportRow:
    tournament_name: str
    timestamp: str
    round: int
    entrant_a: str
    entrant_b: str
    score_a: Score
    score_b: Score
    winner_name: str

    def to_dict(self) -> Dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict) -> "ReportRow":
        return cls(**{f.name: data.get(f.name, '') for f in fields(cls)})


REPORT_HEADERS = [f.name for f in fields(ReportRow)]


def report_row_for(tournament: Tournament, match: Match) -> Optional[ReportRow]:
    """Report row for one match, or None if it is undecided or involved a bye."""
    if not match.is_decided or not match.has_two_real_entrants:
        return None
    return ReportRow(
        tournament_name=tournament.name,
        timestamp=match.decided_at or '',
        round=match.round,
        entrant_a=match.slot_a.display_name,
        entrant_b=match.slot_b.display_name,
        score_a=match.score_a if match.score_a is not None else '',
        score_b=match.score_b if match.score_b is not None else '',
        winner_name=match.winner.display_name,
    )


def report_rows(tournament: Tournament) -> List[ReportRow]:
    """Rows for every reportable match, in decision order."""
    rows = [row for row in (report_row_for(tournament, m) for m in tournament.matches) if row]
    return sorted(rows, key=lambda row: row.timestamp)


def write_report_csv(rows: Iterable[ReportRow], output: IO[str]):
    """Write rows as CSV with a header line."""
    writer = csv.writer(output)
    writer.writerow(REPORT_HEADERS)
    for row in rows:
        writer.writerow([getattr(row, name) for name in REPORT_HEADERS])


def report_filename(tournament_name: str) -> str:
    return f"{'_'.join(tournament_name.split())}_report.csv"
