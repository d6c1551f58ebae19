"""Improvement leaderboard: per-member progress across stored lung scores.

Storage and auth live elsewhere; these functions take submissions as plain
records and compute the ranking view.
"""
import math
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Dict, Iterable, List, Optional


SUBMIT_COOLDOWN = timedelta(hours=24)


@dataclass(frozen=True)
class Submission:
    user_id: str
    score: int
    submitted_at: datetime


@dataclass(frozen=True)
class MemberStats:
    user_id: str
    count: int
    first_score: Optional[int]
    latest_score: Optional[int]
    improvement_pct: Optional[float]
    streak: int


def improvement_pct(first: float, latest: float) -> float:
    """Share of the remaining headroom (100 - first) recovered, in percent."""
    headroom = 100 - first
    if headroom <= 0:
        return 0.0
    # ties toward +inf, like Math.round
    return math.floor((latest - first) / headroom * 100 * 10 + 0.5) / 10


def streak_days(days: Iterable[date], today: date) -> int:
    """Consecutive submission days, alive if the latest is today or yesterday."""
    unique = sorted(set(days), reverse=True)
    if not unique or unique[0] < today - timedelta(days=1):
        return 0
    streak = 1
    for newer, older in zip(unique, unique[1:]):
        if newer - older != timedelta(days=1):
            break
        streak += 1
    return streak


def member_stats(user_id: str, submissions: Iterable[Submission], today: date) -> MemberStats:
    subs = sorted((s for s in submissions if s.user_id == user_id), key=lambda s: s.submitted_at)
    if not subs:
        return MemberStats(user_id, 0, None, None, None, 0)
    first, latest = subs[0].score, subs[-1].score
    return MemberStats(
        user_id=user_id,
        count=len(subs),
        first_score=first,
        latest_score=latest,
        improvement_pct=improvement_pct(first, latest) if len(subs) >= 2 else None,
        streak=streak_days((s.submitted_at.date() for s in subs), today),
    )


def leaderboard(submissions: Iterable[Submission], today: date) -> List[MemberStats]:
    by_user: Dict[str, List[Submission]] = {}
    for s in submissions:
        by_user.setdefault(s.user_id, []).append(s)
    return rank_members(member_stats(uid, subs, today) for uid, subs in by_user.items())


def rank_members(stats: Iterable[MemberStats]) -> List[MemberStats]:
    # improvement descending, members without one at the bottom
    return sorted(
        stats,
        key=lambda m: (m.improvement_pct is None, -(m.improvement_pct or 0.0)),
    )


def cooldown_remaining(last_submitted: Optional[datetime], now: datetime,
                       cooldown: timedelta = SUBMIT_COOLDOWN) -> timedelta:
    if last_submitted is None:
        return timedelta(0)
    remaining = cooldown - (now - last_submitted)
    return remaining if remaining > timedelta(0) else timedelta(0)
