"""
In-memory store of finished sessions with calendar queries and pandas
summaries.
"""

import logging
from datetime import date, datetime
from typing import Dict, List

import pandas as pd

from ..types import TrackingSession

logger = logging.getLogger(__name__)


SESSION_COLUMNS = [
    'id', 'start', 'end', 'total_duration', 'time_focused', 'time_distracted',
    'time_inactive', 'efficiency', 'average_engagement', 'total_blinks', 'pomodoro',
]


def _local_datetime(timestamp_ms: int) -> datetime:
    return datetime.fromtimestamp(timestamp_ms / 1000.0)


def format_date_key(day: date) -> str:
    return day.strftime('%Y-%m-%d')


class SessionHistory:
    """Finished sessions in insertion order."""

    def __init__(self):
        self.sessions: List[TrackingSession] = []

    def add_session(self, session: TrackingSession) -> None:
        if not session.is_finished:
            raise ValueError(f"Session {session.id} has not been finalized")
        self.sessions.append(session)
        logger.info(f"Session {session.id} added to history ({len(self.sessions)} total)")

    def sessions_by_date(self, day: date) -> List[TrackingSession]:
        return [s for s in self.sessions if _local_datetime(s.start_time).date() == day]

    def sessions_by_month(self, year: int, month: int) -> Dict[str, List[TrackingSession]]:
        """Sessions of one month grouped by ``YYYY-MM-DD``. ``month`` is 1-based."""
        result: Dict[str, List[TrackingSession]] = {}
        for session in self.sessions:
            started = _local_datetime(session.start_time)
            if started.year == year and started.month == month:
                result.setdefault(format_date_key(started.date()), []).append(session)
        return result

    def delete_session(self, session_id: str) -> bool:
        remaining = [s for s in self.sessions if s.id != session_id]
        removed = len(remaining) != len(self.sessions)
        self.sessions = remaining
        return removed

    def clear(self) -> None:
        self.sessions = []

    def to_dataframe(self) -> pd.DataFrame:
        """One row per session."""
        rows = []
        for session in self.sessions:
            metrics = session.metrics
            rows.append({
                'id': session.id,
                'start': _local_datetime(session.start_time),
                'end': _local_datetime(session.end_time),
                'total_duration': session.total_duration,
                'time_focused': metrics.time_focused,
                'time_distracted': metrics.time_distracted,
                'time_inactive': metrics.time_inactive,
                'efficiency': metrics.efficiency,
                'average_engagement': metrics.average_engagement,
                'total_blinks': metrics.total_blinks,
                'pomodoro': bool(session.tags.get('pomodoro', False)),
            })
        return pd.DataFrame(rows, columns=SESSION_COLUMNS)

    def daily_summary(self) -> pd.DataFrame:
        """Per-day session count, focused seconds and mean efficiency."""
        df = self.to_dataframe()
        if df.empty:
            return pd.DataFrame(columns=['date', 'sessions', 'time_focused', 'efficiency'])

        df['date'] = df['start'].dt.strftime('%Y-%m-%d')
        summary = df.groupby('date').agg(
            sessions=('id', 'count'),
            time_focused=('time_focused', 'sum'),
            efficiency=('efficiency', 'mean'),
        ).reset_index()
        return summary
