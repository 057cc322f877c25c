"""
repositories/query_registry.py
------------------------------
Static table of the paged queries behind every browsable route.

Each entity query binds exactly three parameters, in order:
(owner_id, offset, limit). Each count query binds exactly one: (owner_id).
Caller-supplied values only ever travel as bound parameters.
"""

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Mapping, Optional, Union

from models.errors import UnknownRouteError


class Route(str, Enum):
    """The closed set of browsable record routes."""
    LIVESTOCK = "livestock"
    VACCINATIONS = "vaccinations"
    VET_VISITS = "vetVisits"
    PASTURE_MAINTENANCE = "pastureMaintenance"
    MEDICATION = "medication"
    CALVES = "calves"
    PASTURES = "pastures"

    def __str__(self) -> str:
        return self.value

    @property
    def descriptor(self) -> "RouteDescriptor":
        return QUERY_REGISTRY[self]


@dataclass(frozen=True)
class ParentCheck:
    """
    A column of the route's table pointing at a row the owner must own.

    Attributes:
        column: Referencing column on the route's table.
        query: Counts matching parent rows; params (value, owner_id).
    """
    column: str
    query: str


_OWNED_LIVESTOCK = "SELECT COUNT(*) AS total FROM livestock WHERE livestock_id = %s AND owner_id = %s;"
_OWNED_PASTURE = "SELECT COUNT(*) AS total FROM pastures WHERE pasture_id = %s AND owner_id = %s;"


@dataclass(frozen=True)
class RouteDescriptor:
    """
    Queries and write target for one route.

    Attributes:
        route: The route this descriptor belongs to.
        table: Table that inserts/updates/deletes for this route target.
        entity_query: Page of rows for an owner; params (owner_id, offset, limit).
        count_query: Total matching rows for an owner; params (owner_id,).
        owner_scope: Predicate on `table` limiting writes to one owner's rows;
            params (owner_id,).
        owner_column: Column holding the owner on `table`, if it has one.
        parents: Referencing columns whose targets must belong to the owner.
    """
    route: Route
    table: str
    entity_query: str
    count_query: str
    owner_scope: str
    owner_column: Optional[str] = None
    parents: tuple[ParentCheck, ...] = ()


_DESCRIPTORS = (
    RouteDescriptor(
        route=Route.LIVESTOCK,
        table="livestock",
        entity_query="""
            SELECT * FROM livestock
            WHERE owner_id = %s
            ORDER BY livestock_id
            OFFSET %s LIMIT %s;
        """,
        count_query="SELECT COUNT(*) AS total FROM livestock WHERE owner_id = %s;",
        owner_scope="owner_id = %s",
        owner_column="owner_id",
    ),
    RouteDescriptor(
        route=Route.VACCINATIONS,
        table="vaccinations",
        entity_query="""
            SELECT vaccinations.vacc_id, vaccinations.vac_type, vaccinations.date_given
            FROM vaccinations
            JOIN livestock ON livestock.livestock_id = vaccinations.animal_id
            WHERE livestock.owner_id = %s
            ORDER BY vaccinations.vacc_id
            OFFSET %s LIMIT %s;
        """,
        count_query="""
            SELECT COUNT(*) AS total
            FROM vaccinations
            JOIN livestock ON livestock.livestock_id = vaccinations.animal_id
            WHERE livestock.owner_id = %s;
        """,
        owner_scope="animal_id IN (SELECT livestock_id FROM livestock WHERE owner_id = %s)",
        parents=(ParentCheck("animal_id", _OWNED_LIVESTOCK),),
    ),
    RouteDescriptor(
        route=Route.VET_VISITS,
        table="vetvisit",
        entity_query="""
            SELECT vetvisit.livestock_id, vetvisit.visit_date, vetvisit.visit_id,
                   vetvisit.vet_name, vetvisit.cost, vetvisit.reason, vetvisit.notes
            FROM vetvisit
            JOIN livestock ON livestock.livestock_id = vetvisit.livestock_id
            WHERE livestock.owner_id = %s
            ORDER BY vetvisit.visit_id
            OFFSET %s LIMIT %s;
        """,
        count_query="""
            SELECT COUNT(*) AS total
            FROM vetvisit
            JOIN livestock ON livestock.livestock_id = vetvisit.livestock_id
            WHERE livestock.owner_id = %s;
        """,
        owner_scope="livestock_id IN (SELECT livestock_id FROM livestock WHERE owner_id = %s)",
        parents=(ParentCheck("livestock_id", _OWNED_LIVESTOCK),),
    ),
    RouteDescriptor(
        route=Route.PASTURE_MAINTENANCE,
        table="pasture_maintenance",
        entity_query="""
            SELECT pasture_maintenance.maintenance_id, pasture_maintenance.location,
                   pasture_maintenance.maintenance_type, pasture_maintenance.cost,
                   pasture_maintenance.notes
            FROM pasture_maintenance
            JOIN pastures ON pastures.pasture_id = pasture_maintenance.location
            WHERE pastures.owner_id = %s
            ORDER BY pasture_maintenance.maintenance_id
            OFFSET %s LIMIT %s;
        """,
        count_query="""
            SELECT COUNT(*) AS total
            FROM pasture_maintenance
            JOIN pastures ON pastures.pasture_id = pasture_maintenance.location
            WHERE pastures.owner_id = %s;
        """,
        owner_scope="location IN (SELECT pasture_id FROM pastures WHERE owner_id = %s)",
        parents=(ParentCheck("location", _OWNED_PASTURE),),
    ),
    RouteDescriptor(
        route=Route.MEDICATION,
        table="medication",
        entity_query="""
            SELECT medication.livestock_id, medication.med_id, medication.medication_name,
                   medication.start_date, medication.end_date, medication.med_interval
            FROM medication
            JOIN livestock ON livestock.livestock_id = medication.livestock_id
            WHERE livestock.owner_id = %s
            ORDER BY medication.med_id
            OFFSET %s LIMIT %s;
        """,
        count_query="""
            SELECT COUNT(*) AS total
            FROM medication
            JOIN livestock ON livestock.livestock_id = medication.livestock_id
            WHERE livestock.owner_id = %s;
        """,
        owner_scope="livestock_id IN (SELECT livestock_id FROM livestock WHERE owner_id = %s)",
        parents=(ParentCheck("livestock_id", _OWNED_LIVESTOCK),),
    ),
    RouteDescriptor(
        route=Route.CALVES,
        table="calves",
        entity_query="""
            SELECT calves.calf_id, calves.cow_id, calves.sired_id, calves.calf_subtype,
                   calves.vaccine_complete, calves.water_complete, calves.feeder_complete
            FROM calves
            JOIN livestock ON calves.calf_id = livestock.livestock_id
            WHERE livestock.owner_id = %s
            ORDER BY calves.calf_id
            OFFSET %s LIMIT %s;
        """,
        count_query="""
            SELECT COUNT(*) AS total
            FROM calves
            JOIN livestock ON calves.calf_id = livestock.livestock_id
            WHERE livestock.owner_id = %s;
        """,
        owner_scope="calf_id IN (SELECT livestock_id FROM livestock WHERE owner_id = %s)",
        parents=(
            ParentCheck("calf_id", _OWNED_LIVESTOCK),
            ParentCheck("cow_id", _OWNED_LIVESTOCK),
            ParentCheck("sired_id", _OWNED_LIVESTOCK),
        ),
    ),
    RouteDescriptor(
        route=Route.PASTURES,
        table="pastures",
        entity_query="""
            SELECT * FROM pastures
            WHERE owner_id = %s
            ORDER BY pasture_id
            OFFSET %s LIMIT %s;
        """,
        count_query="SELECT COUNT(*) AS total FROM pastures WHERE owner_id = %s;",
        owner_scope="owner_id = %s",
        owner_column="owner_id",
    ),
)

QUERY_REGISTRY: Mapping[Route, RouteDescriptor] = MappingProxyType(
    {d.route: d for d in _DESCRIPTORS}
)


def lookup(route: Union[str, Route]) -> RouteDescriptor:
    """
    Return the descriptor for a route name.

    Raises:
        UnknownRouteError: If `route` is not a registered route.
    """
    try:
        return QUERY_REGISTRY[Route(route)]
    except ValueError:
        raise UnknownRouteError(str(route)) from None


def route_names() -> list[str]:
    """Registered route names, in declaration order."""
    return [r.value for r in Route]
