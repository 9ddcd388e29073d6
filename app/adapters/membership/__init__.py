"""Membership lookup adapters - abstracts over the relational store."""

from app.adapters.membership.base import AbstractMembershipRepository
from app.adapters.membership.in_memory import InMemoryMembershipRepository

__all__ = [
    "AbstractMembershipRepository",
    "InMemoryMembershipRepository",
]
