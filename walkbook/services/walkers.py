"""Walker registry: stable colour assignment, contact details and search."""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Optional, Set, Tuple

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, col, func, select

from ..core import COLOR_PALETTE_SIZE, UnavailableError, guarded
from ..models import Walker
from .slots import validate_name

logger = logging.getLogger(__name__)

# Attempts at claiming a colour before giving up on a contended registration.
MAX_REGISTER_ATTEMPTS = 5


def lowest_free_index(used: Set[int], palette_size: int, population: int) -> int:
    """Smallest index in ``[0, palette_size)`` not in ``used``.

    Once every index is taken, colours are reused round-robin by population.
    """

    for index in range(palette_size):
        if index not in used:
            return index
    return population % palette_size


def registration_round(reused: bool, palette_size: int, population: int) -> int:
    """Round stored beside a new walker's colour index.

    A colour claimed while still free is always round 0, so two walkers
    racing for the same free colour collide on ``(index, 0)``. Reused
    colours take their round from the population they were computed from.
    """

    if not reused:
        return 0
    return max(1, population // palette_size)


def fallback_color_index(name: str, palette_size: int = COLOR_PALETTE_SIZE) -> int:
    """Deterministic colour for a name with no registry row.

    Only used where a read must not register the name. Unlike registry
    assignment it does not keep colours distinct.
    """

    value = 0
    for char in name:
        value = (value * 31 + ord(char)) & 0xFFFFFFFF
    if value >= 0x80000000:
        value -= 0x100000000
    return abs(value) % palette_size


def walker_to_dict(walker: Walker) -> Dict[str, Any]:
    """Serialise a walker model to API-friendly dict."""

    return {
        "name": walker.name,
        "colorIndex": walker.color_index,
        "contact": walker.contact,
    }


class WalkerRegistry:
    """Maps display names to a palette colour and optional contact."""

    def __init__(self, session: Session, palette_size: int = COLOR_PALETTE_SIZE) -> None:
        self._session = session
        self._palette_size = palette_size

    @guarded
    def get(self, name: str) -> Optional[Walker]:
        return self._session.get(Walker, name)

    @guarded
    def list(self) -> List[Walker]:
        return list(self._session.exec(select(Walker).order_by(Walker.name)).all())

    @guarded
    def search(self, query: Optional[str]) -> List[Walker]:
        """Case-insensitive substring match on name; blank query lists all."""

        needle = (query or "").strip().lower()
        if not needle:
            return self.list()
        return list(
            self._session.exec(
                select(Walker)
                .where(func.lower(Walker.name).contains(needle, autoescape=True))
                .order_by(Walker.name)
            ).all()
        )

    def get_color_index(self, name: str) -> int:
        """Colour for ``name``, registering the name on first sight."""

        return self.upsert(name).color_index

    @guarded
    def upsert(self, name: str, contact: Optional[str] = None) -> Walker:
        """Register ``name`` if unknown and overwrite its contact if given.

        Idempotent: repeating the call leaves the stored row and the returned
        colour unchanged.
        """

        name = validate_name(name)
        contact = (contact or "").strip() or None

        walker = self._session.get(Walker, name)
        if walker is None:
            walker = self._register(name, contact)

        if contact is not None and walker.contact != contact:
            walker.contact = contact
            self._session.add(walker)
            self._session.commit()
            self._session.refresh(walker)
            logger.info("Updated contact for walker '%s'", name)
        return walker

    @guarded
    def color_map(self, names: Iterable[str]) -> Dict[str, int]:
        """Stored colours for ``names``; unregistered names get the hash fallback.

        Never registers anything.
        """

        wanted = set(names)
        if not wanted:
            return {}
        rows = self._session.exec(
            select(Walker.name, Walker.color_index).where(col(Walker.name).in_(wanted))
        ).all()
        colors = {row_name: index for row_name, index in rows}
        for name in wanted - colors.keys():
            colors[name] = fallback_color_index(name, self._palette_size)
        return colors

    def _palette_usage(self) -> Tuple[Set[int], int]:
        """Colour indices in use and the number of registered walkers."""

        used = set(self._session.exec(select(Walker.color_index).distinct()).all())
        population = self._session.exec(select(func.count()).select_from(Walker)).one()
        return used, population

    def _register(self, name: str, contact: Optional[str]) -> Walker:
        """Insert a new walker on the lowest free colour.

        A unique name and a unique (colour, round) pair turn every race with a
        concurrent registration into an ``IntegrityError``; the loser re-reads
        and either finds its name already registered or claims the next colour.
        """

        for attempt in range(1, MAX_REGISTER_ATTEMPTS + 1):
            used, population = self._palette_usage()
            index = lowest_free_index(used, self._palette_size, population)
            color_round = registration_round(
                index in used, self._palette_size, population
            )

            walker = Walker(
                name=name,
                color_index=index,
                color_round=color_round,
                contact=contact,
            )
            self._session.add(walker)
            try:
                self._session.commit()
            except IntegrityError:
                self._session.rollback()
                existing = self._session.get(Walker, name)
                if existing is not None:
                    return existing
                logger.info(
                    "Colour %d contended for walker '%s' (attempt %d), retrying",
                    index,
                    name,
                    attempt,
                )
                continue

            self._session.refresh(walker)
            logger.info("Registered walker '%s' with colour %d", name, index)
            return walker

        raise UnavailableError(f"Could not register walker '{name}', please retry")


__all__ = [
    "MAX_REGISTER_ATTEMPTS",
    "WalkerRegistry",
    "fallback_color_index",
    "lowest_free_index",
    "registration_round",
    "walker_to_dict",
]
