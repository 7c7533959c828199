"""Compatibility graphs used by the technical and performance scorers.

Kept apart from the scoring logic so the graphs can be tested and extended
on their own.
"""

from types import MappingProxyType
from typing import Iterable, Mapping

from .schema import CloudProvider, DatabaseType, TechnicalLevel


# Databases a profile's store can migrate to with moderate effort.
# Directed: firebase -> mongodb does not imply mongodb -> firebase.
DATABASE_ADJACENCY: Mapping[DatabaseType, frozenset[DatabaseType]] = MappingProxyType({
    DatabaseType.FIREBASE: frozenset({DatabaseType.SUPABASE, DatabaseType.MONGODB}),
    DatabaseType.SUPABASE: frozenset({DatabaseType.FIREBASE, DatabaseType.POSTGRESQL}),
    DatabaseType.POSTGRESQL: frozenset({DatabaseType.MYSQL, DatabaseType.SUPABASE}),
    DatabaseType.MYSQL: frozenset({DatabaseType.POSTGRESQL, DatabaseType.SQLITE}),
    DatabaseType.MONGODB: frozenset({DatabaseType.FIREBASE}),
    DatabaseType.SQLITE: frozenset({DatabaseType.MYSQL}),
    DatabaseType.REDIS: frozenset({DatabaseType.MONGODB}),
    DatabaseType.CUSTOM_API: frozenset(),
})

# Clouds where a high-availability deployment is available out of the box.
HA_CAPABLE_CLOUDS: frozenset[CloudProvider] = frozenset({
    CloudProvider.AWS,
    CloudProvider.GCP,
    CloudProvider.AZURE,
    CloudProvider.VERCEL,
})

TECHNICAL_LEVEL_ORDER: tuple[TechnicalLevel, ...] = tuple(TechnicalLevel)


def adjacent_databases(
    database: DatabaseType,
    adjacency: Mapping[DatabaseType, frozenset[DatabaseType]] = DATABASE_ADJACENCY,
) -> frozenset[DatabaseType]:
    """Return the close database families of ``database``."""
    return adjacency.get(database, frozenset())


def is_adjacent(
    database: DatabaseType,
    supported: Iterable[DatabaseType],
    adjacency: Mapping[DatabaseType, frozenset[DatabaseType]] = DATABASE_ADJACENCY,
) -> bool:
    """Check if any supported database is a close family of ``database``."""
    close = adjacent_databases(database, adjacency)
    return any(db in close for db in supported)


def is_ha_capable(cloud: CloudProvider, supported_clouds: Iterable[CloudProvider]) -> bool:
    """Check if ``cloud`` offers HA and the configuration supports it."""
    return cloud in HA_CAPABLE_CLOUDS and cloud in set(supported_clouds)


def technical_gap(profile_level: TechnicalLevel, required_level: TechnicalLevel) -> int:
    """Number of levels the team falls short of the requirement (0 if none)."""
    return max(0, required_level.ordinal - profile_level.ordinal)
