"""
Improvement leaderboard tests.
"""

from datetime import date, datetime, timedelta

import pytest

from modules.lung.leaderboard import (
    MemberStats,
    Submission,
    cooldown_remaining,
    improvement_pct,
    leaderboard,
    member_stats,
    rank_members,
    streak_days,
)

TODAY = date(2026, 3, 10)


def at(days_ago, hour=12):
    d = TODAY - timedelta(days=days_ago)
    return datetime(d.year, d.month, d.day, hour)


class TestImprovement:

    @pytest.mark.parametrize("first, latest, expected", [
        (60, 80, 50.0),
        (60, 50, -25.0),
        (70, 80, 33.3),
        (40, 40, 0.0),
        (100, 90, 0.0),
        (0, 100, 100.0),
        (20, 19, -1.2),
        (20, 21, 1.3),
    ])
    def test_improvement_pct(self, first, latest, expected):
        assert improvement_pct(first, latest) == expected


class TestStreak:

    def test_consecutive_days(self):
        assert streak_days([TODAY, TODAY - timedelta(1), TODAY - timedelta(2)], TODAY) == 3

    def test_alive_from_yesterday(self):
        assert streak_days([TODAY - timedelta(1), TODAY - timedelta(2)], TODAY) == 2

    def test_gap_breaks_streak(self):
        assert streak_days([TODAY, TODAY - timedelta(2), TODAY - timedelta(3)], TODAY) == 1

    def test_expired(self):
        assert streak_days([TODAY - timedelta(2)], TODAY) == 0

    def test_same_day_counts_once(self):
        assert streak_days([TODAY, TODAY, TODAY - timedelta(1)], TODAY) == 2

    def test_empty(self):
        assert streak_days([], TODAY) == 0


class TestMembers:

    @pytest.fixture
    def submissions(self):
        return [
            Submission("ana", 80, at(0)),
            Submission("ana", 60, at(3)),
            Submission("ben", 70, at(5)),
            Submission("ben", 67, at(1)),
            Submission("cy", 90, at(0)),
        ]

    def test_member_stats_orders_by_time(self, submissions):
        stats = member_stats("ana", submissions, TODAY)
        assert stats.first_score == 60
        assert stats.latest_score == 80
        assert stats.count == 2
        assert stats.improvement_pct == 50.0
        assert stats.streak == 1

    def test_single_submission_has_no_improvement(self, submissions):
        stats = member_stats("cy", submissions, TODAY)
        assert stats.improvement_pct is None
        assert stats.count == 1

    def test_unknown_member(self, submissions):
        assert member_stats("zed", submissions, TODAY) == MemberStats("zed", 0, None, None, None, 0)

    def test_leaderboard_ranking(self, submissions):
        ranked = leaderboard(submissions, TODAY)
        assert [m.user_id for m in ranked] == ["ana", "ben", "cy"]
        assert ranked[1].improvement_pct == -10.0

    def test_rank_none_last_and_stable(self):
        stats = [
            MemberStats("a", 1, 50, 50, None, 0),
            MemberStats("b", 2, 50, 60, 20.0, 0),
            MemberStats("c", 1, 50, 50, None, 0),
            MemberStats("d", 2, 50, 55, 10.0, 0),
        ]
        assert [m.user_id for m in rank_members(stats)] == ["b", "d", "a", "c"]


class TestCooldown:

    def test_no_previous_submission(self):
        assert cooldown_remaining(None, datetime(2026, 3, 10, 12)) == timedelta(0)

    def test_remaining(self):
        now = datetime(2026, 3, 10, 12)
        assert cooldown_remaining(now - timedelta(hours=1), now) == timedelta(hours=23)

    def test_expired(self):
        now = datetime(2026, 3, 10, 12)
        assert cooldown_remaining(now - timedelta(hours=25), now) == timedelta(0)
