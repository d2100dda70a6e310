"""Shared fixtures: a manually advanced clock and a Decision factory."""

from datetime import datetime, timedelta, timezone

import pytest

from manvsgod.core.config import ManVsGodConfig
from manvsgod.core.rules import Decision, MoralOutcome


START = datetime(2026, 1, 1, 12, 0, 0, tzinfo=timezone.utc)


class ManualClock:
    """Clock callable whose time only moves when told to."""

    def __init__(self, now: datetime = START):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


@pytest.fixture
def clock() -> ManualClock:
    return ManualClock()


@pytest.fixture
def make_decision(clock):
    """Build a valid Decision; keyword arguments override the defaults."""

    def factory(**overrides) -> Decision:
        moral = overrides.pop("moral", None)
        fields = dict(
            actor_id="player-1",
            timestamp=clock(),
            level_index=1,
            piece_kind="pawn",
            position="e4",
            chosen_move="e4e5",
            bet_amount=50,
            suggested_move="spare",
            suggested_confidence=75,
            followed_suggestion=True,
            disobedience_cost=0,
            strategic_score=50,
            moral_score=50,
            outcome="continue",
        )
        if moral is not None:
            captured, weight = moral
            fields["moral_outcome"] = MoralOutcome(piece_kind="pawn", was_captured=captured, moral_weight=weight)
        fields.update(overrides)
        return Decision(**fields)

    return factory


@pytest.fixture
def config(tmp_path) -> ManVsGodConfig:
    """Test configuration with no credentials and a temporary local store."""
    return ManVsGodConfig(
        _env_file=None,
        environment="test",
        local_store_path=tmp_path / "decisions.sqlite",
        google_sheet_id=None,
        google_sheets_api_key=None,
        error_form_url=None,
    )
