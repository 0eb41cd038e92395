"""Development seed data."""

from trainerdesk.seeds.demo import seed_demo

__all__ = ["seed_demo"]
