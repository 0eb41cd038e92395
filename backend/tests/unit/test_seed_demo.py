"""Tests for the demo seed and its ``flask seed demo`` command."""

from __future__ import annotations

from trainerdesk.models import Folder, Routine, Trainer
from trainerdesk.seeds import seed_demo


class TestSeedDemo:
    def test_seed_is_idempotent(self, db, session):
        first = seed_demo(db)
        second = seed_demo(db)

        assert first["trainers"] == {"created": 1, "existing": 0}
        assert first["exercises"]["created"] == 6
        assert second["routines"] == {"created": 0, "existing": 1}
        assert session.query(Trainer).count() == 1
        template = session.query(Routine).one()
        assert [d.day_label for d in sorted(template.days, key=lambda d: d.position)] == ["Day 1", "Day 2"]
        assert [f.name for f in session.query(Folder).order_by(Folder.position)] == [
            "Hypertrophy",
            "Strength",
        ]

    def test_cli_prints_summary(self, app, session):
        runner = app.test_cli_runner()

        result = runner.invoke(args=["seed", "demo"])

        assert result.exit_code == 0, result.output
        assert "Seed summary:" in result.output
        assert "routines" in result.output
