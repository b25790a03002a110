"""
YAML file store for the roster, the active tournament and report rows.

The bracket engine itself never touches storage; callers load and save
explicitly at the tournament boundary.
"""
import logging
import os
from typing import Dict, List, Optional

import yaml
from filelock import FileLock

from .models import Tournament
from .reporting import ReportRow
from .roster import Roster

logger = logging.getLogger(__name__)

ROSTER_FILE = 'roster.yaml'
TOURNAMENT_FILE = 'tournament.yaml'
REPORT_FILE = 'report.yaml'
SETTINGS_FILE = 'settings.yaml'


def get_default_settings() -> Dict:
    return {
        'tournament_name': 'Action Ladder Tournament',
        'format': 'single',
        'report_results': False,
    }


class TournamentStore:
    """Reads and writes tournament state as YAML files in one directory."""

    def __init__(self, data_dir: str, lock_timeout: float = 10):
        self.data_dir = data_dir
        os.makedirs(data_dir, exist_ok=True)
        self.lock = FileLock(os.path.join(data_dir, '.lock'), timeout=lock_timeout)

    def __repr__(self):
        return f"TournamentStore(data_dir={self.data_dir})"

    def _path(self, filename: str) -> str:
        return os.path.join(self.data_dir, filename)

    def _read(self, filename: str):
        path = self._path(filename)
        if not os.path.exists(path):
            return None
        try:
            with open(path, 'r', encoding='utf-8') as f:
                return yaml.safe_load(f)
        except yaml.YAMLError as e:
            logger.warning(f'Failed to parse {path}: {e}')
            return None

    def _write(self, filename: str, data):
        with open(self._path(filename), 'w', encoding='utf-8') as f:
            yaml.dump(data, f, default_flow_style=False, allow_unicode=True)

    def _delete(self, filename: str):
        path = self._path(filename)
        if os.path.exists(path):
            os.remove(path)

    def load_roster(self) -> Roster:
        data = self._read(ROSTER_FILE) or {}
        return Roster.from_list(data.get('entrants', []))

    def save_roster(self, roster: Roster):
        self._write(ROSTER_FILE, {'entrants': roster.to_list()})

    def load_tournament(self) -> Optional[Tournament]:
        data = self._read(TOURNAMENT_FILE)
        if not data:
            return None
        try:
            return Tournament.from_dict(data)
        except (KeyError, ValueError, TypeError, AttributeError) as e:
            logger.warning(f'Ignoring malformed tournament in {self._path(TOURNAMENT_FILE)}: {e}')
            return None

    def save_tournament(self, tournament: Tournament):
        self._write(TOURNAMENT_FILE, tournament.to_dict())

    def delete_tournament(self):
        self._delete(TOURNAMENT_FILE)

    def load_report_rows(self) -> List[ReportRow]:
        data = self._read(REPORT_FILE) or {}
        return [ReportRow.from_dict(row) for row in data.get('rows', [])]

    def save_report_rows(self, rows: List[ReportRow]):
        self._write(REPORT_FILE, {'rows': [row.to_dict() for row in rows]})

    def load_settings(self) -> Dict:
        settings = get_default_settings()
        data = self._read(SETTINGS_FILE)
        if isinstance(data, dict):
            settings.update(data)
        return settings

    def save_settings(self, settings: Dict):
        self._write(SETTINGS_FILE, settings)

    def reset(self, keep_roster: bool = True):
        """Discard the bracket and its report rows, optionally the roster too."""
        self.delete_tournament()
        self._delete(REPORT_FILE)
        if not keep_roster:
            self._delete(ROSTER_FILE)
        logger.info(f'Tournament data in {self.data_dir} reset (roster {"kept" if keep_roster else "cleared"})')
