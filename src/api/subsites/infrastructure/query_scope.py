"""Subsite scoping for group queries.

Reads of the groups table are limited to the groups valid in the active
subsite: groups with global access plus groups explicitly linked to that
subsite. Scoping is a pure function over SQLAlchemy ``Select`` objects, so
it composes with any query and can be attached to a session class through
the ``do_orm_execute`` event.

The active subsite has three meaningful states:

- ``None``: no subsite context, the query is left alone
- ``0``: the main site, which either sees every group or, when configured,
  only global groups
- ``> 0``: a specific subsite, which sees global groups and linked groups
"""

from __future__ import annotations

from collections.abc import Callable, Iterator, Mapping
from dataclasses import dataclass
from enum import StrEnum
from typing import Any

from sqlalchemy import Select, and_, event, or_
from sqlalchemy.orm import ORMExecuteState
from sqlalchemy.sql import functions, operators, visitors
from sqlalchemy.sql.elements import (
    BinaryExpression,
    BindParameter,
    BooleanClauseList,
    ColumnClause,
    ColumnElement,
    Grouping,
    Label,
)
from sqlalchemy.sql.selectable import Alias, FromClause, Join, TableClause

from infrastructure.settings import SubsiteSettings
from shared_kernel.middleware.subsite_context import (
    MAIN_SITE_ID,
    SubsiteContext,
    current_subsite_context,
)
from subsites.infrastructure.models import GroupModel, GroupSubsiteModel
from subsites.infrastructure.observability import (
    DefaultQueryScopeProbe,
    QueryScopeProbe,
)

GROUPS = GroupModel.__table__
GROUP_SUBSITES = GroupSubsiteModel.__table__

# Query parameter callers set to False to read groups unscoped
SUBSITE_FILTER_PARAM = "Subsite.filter"

# Execution option marking a statement that has already been scoped
SCOPED_OPTION = "subsites_group_scoped"

# Functions whose presence makes a select an aggregate query
AGGREGATE_FUNCTIONS = frozenset(
    {
        "array_agg",
        "avg",
        "bool_and",
        "bool_or",
        "count",
        "every",
        "max",
        "min",
        "string_agg",
        "sum",
    }
)


class ScopeMode(StrEnum):
    """How a scoped query restricts groups."""

    SUBSITE = "subsite"
    MAIN_SITE = "main_site"


class SkipReason(StrEnum):
    """Why a query was left unscoped."""

    NOT_A_GROUP_QUERY = "not_a_group_query"
    ALREADY_SCOPED = "already_scoped"
    FILTER_DISABLED = "filter_disabled"
    BYPASS_REQUESTED = "bypass_requested"
    MAIN_SITE = "main_site"
    QUERY_PARAM = "query_param"
    FILTERS_ON_ID = "filters_on_id"
    NO_SUBSITE = "no_subsite"


@dataclass(frozen=True)
class ScopeOptions:
    """Configuration passed explicitly into every scoping call.

    Attributes:
        filter_disabled: Global kill-switch; no group query is scoped.
        main_site_shows_all: On the main site (subsite 0) leave queries
            unscoped. When False the main site only sees global groups.
    """

    filter_disabled: bool = False
    main_site_shows_all: bool = True

    @classmethod
    def from_settings(cls, settings: SubsiteSettings) -> ScopeOptions:
        """Build options from application settings."""
        return cls(
            filter_disabled=settings.disable_filter,
            main_site_shows_all=settings.main_site_shows_all_groups,
        )


def scope_group_query(
    statement: Select[Any],
    context: SubsiteContext,
    options: ScopeOptions | None = None,
    query_params: Mapping[str, Any] | None = None,
    probe: QueryScopeProbe | None = None,
) -> Select[Any]:
    """Return ``statement`` limited to the groups visible in the active subsite.

    The input statement is never modified. When no scoping applies the same
    object is returned; otherwise a new statement carrying the subsite join
    and the visibility predicate. Row selects that do not already select
    ``access_all_subsites`` also get it as a trailing descending sort.

    Visibility is a single disjunction per row (linked to the subsite OR
    global access), so global groups survive the outer join.

    Args:
        statement: A SELECT, typically ``select(GroupModel)``
        context: The active subsite context
        options: Scoping configuration
        query_params: Per-query parameters; ``{"Subsite.filter": False}``
            leaves the query unscoped
        probe: Optional domain probe for observability

    Returns:
        The scoped statement, or ``statement`` itself when left unscoped
    """
    options = options or ScopeOptions()
    probe = probe or DefaultQueryScopeProbe()

    reason = _skip_reason(statement, context, options, query_params or {})
    if reason is not None:
        probe.scope_skipped(reason, context.subsite_id)
        return statement

    subsite_id = context.subsite_id
    assert subsite_id is not None

    scoped = statement
    mode = ScopeMode.SUBSITE if subsite_id else ScopeMode.MAIN_SITE

    if _has_membership_join(statement):
        probe.membership_join_already_present(subsite_id)
    elif mode is ScopeMode.SUBSITE:
        scoped = scoped.outerjoin(
            GROUP_SUBSITES,
            and_(
                GROUP_SUBSITES.c.group_id == GROUPS.c.id,
                GROUP_SUBSITES.c.subsite_id == subsite_id,
            ),
        ).where(
            or_(
                GROUP_SUBSITES.c.subsite_id.is_not(None),
                GROUPS.c.access_all_subsites.is_(True),
            )
        )
    else:
        scoped = scoped.where(GROUPS.c.access_all_subsites.is_(True))

    if _wants_global_sort(statement):
        scoped = scoped.order_by(GROUPS.c.access_all_subsites.desc())

    probe.scope_applied(subsite_id, mode)
    return scoped.execution_options(**{SCOPED_OPTION: True})


class GroupQueryScope:
    """Scopes group queries using the request's subsite context.

    Binds options, a context provider and a probe so repositories and the
    session listener share one configuration.
    """

    def __init__(
        self,
        options: ScopeOptions | None = None,
        context_provider: Callable[[], SubsiteContext] = current_subsite_context,
        probe: QueryScopeProbe | None = None,
    ) -> None:
        self._options = options or ScopeOptions()
        self._context_provider = context_provider
        self._probe = probe or DefaultQueryScopeProbe()

    @property
    def options(self) -> ScopeOptions:
        """The scoping configuration."""
        return self._options

    def apply(
        self,
        statement: Select[Any],
        query_params: Mapping[str, Any] | None = None,
    ) -> Select[Any]:
        """Scope ``statement`` under the current subsite context."""
        return scope_group_query(
            statement,
            self._context_provider(),
            options=self._options,
            query_params=query_params,
            probe=self._probe,
        )

    def install(self, target: Any) -> None:
        """Scope every ORM SELECT executed through ``target``.

        Args:
            target: A ``Session`` subclass or ``sessionmaker``. Statement
                execution options are used as query parameters.
        """
        event.listen(target, "do_orm_execute", self._on_orm_execute)

    def uninstall(self, target: Any) -> None:
        """Remove the listener added by :meth:`install`."""
        event.remove(target, "do_orm_execute", self._on_orm_execute)

    def _on_orm_execute(self, execute_state: ORMExecuteState) -> None:
        if not execute_state.is_select:
            return
        statement = execute_state.statement
        if not isinstance(statement, Select):
            return
        execute_state.statement = self.apply(
            statement, query_params=execute_state.execution_options
        )


def install_group_scoping(
    target: Any,
    settings: SubsiteSettings,
    context_provider: Callable[[], SubsiteContext] = current_subsite_context,
    probe: QueryScopeProbe | None = None,
) -> GroupQueryScope:
    """Attach group scoping to a session class or sessionmaker.

    Returns:
        The installed scope, which can later be uninstalled
    """
    scope = GroupQueryScope(
        options=ScopeOptions.from_settings(settings),
        context_provider=context_provider,
        probe=probe,
    )
    scope.install(target)
    return scope


def _skip_reason(
    statement: Select[Any],
    context: SubsiteContext,
    options: ScopeOptions,
    query_params: Mapping[str, Any],
) -> SkipReason | None:
    if not _is_group_query(statement):
        return SkipReason.NOT_A_GROUP_QUERY
    if statement.get_execution_options().get(SCOPED_OPTION):
        return SkipReason.ALREADY_SCOPED
    if options.filter_disabled:
        return SkipReason.FILTER_DISABLED
    if context.bypass_filter:
        return SkipReason.BYPASS_REQUESTED
    if context.subsite_id == MAIN_SITE_ID and options.main_site_shows_all:
        return SkipReason.MAIN_SITE
    if query_params.get(SUBSITE_FILTER_PARAM) is False:
        return SkipReason.QUERY_PARAM
    if _filters_on_group_id(statement.whereclause):
        return SkipReason.FILTERS_ON_ID
    if context.subsite_id is None:
        return SkipReason.NO_SUBSITE
    return None


def _from_tables(
    from_clause: FromClause, through_aliases: bool
) -> Iterator[TableClause]:
    """Yield the tables a FROM element reads, descending into joins only."""
    if isinstance(from_clause, Join):
        yield from _from_tables(from_clause.left, through_aliases)
        yield from _from_tables(from_clause.right, through_aliases)
    elif isinstance(from_clause, TableClause):
        yield from_clause
    elif through_aliases and isinstance(from_clause, Alias):
        yield from _from_tables(from_clause.element, through_aliases)


def _is_group_query(statement: Select[Any]) -> bool:
    return any(
        table.name == GROUPS.name
        for from_clause in statement.get_final_froms()
        for table in _from_tables(from_clause, through_aliases=False)
    )


def _has_membership_join(statement: Select[Any]) -> bool:
    return any(
        table.name == GROUP_SUBSITES.name
        for from_clause in statement.get_final_froms()
        for table in _from_tables(from_clause, through_aliases=True)
    )


def _is_group_column(element: Any, name: str) -> bool:
    if isinstance(element, Label):
        element = element.element
    if not isinstance(element, ColumnClause) or element.name != name:
        return False
    table = element.table
    return isinstance(table, TableClause) and table.name == GROUPS.name


def _filters_on_group_id(clause: ColumnElement[Any] | None) -> bool:
    """True when a top-level conjunct pins ``groups.id`` to literal values."""
    if clause is None:
        return False
    if isinstance(clause, Grouping):
        return _filters_on_group_id(clause.element)
    if isinstance(clause, BooleanClauseList):
        return clause.operator is operators.and_ and any(
            _filters_on_group_id(child) for child in clause.clauses
        )
    if isinstance(clause, BinaryExpression):
        return (
            clause.operator in (operators.eq, operators.in_op)
            and _is_group_column(clause.left, "id")
            and isinstance(clause.right, BindParameter)
        )
    return False


def _is_aggregate(column: ColumnElement[Any]) -> bool:
    return any(
        isinstance(element, functions.FunctionElement)
        and getattr(element, "name", "").lower() in AGGREGATE_FUNCTIONS
        for element in visitors.iterate(column)
    )


def _wants_global_sort(statement: Select[Any]) -> bool:
    """Whether ``access_all_subsites DESC`` can be appended to the statement.

    Not when the column is already selected. Not for aggregate, grouped or
    distinct selects, where ordering by a column outside the select list
    or the GROUP BY is rejected by PostgreSQL.
    """
    columns = list(statement.selected_columns)
    if any(_is_group_column(column, "access_all_subsites") for column in columns):
        return False
    if any(_is_aggregate(column) for column in columns):
        return False
    return not (statement._group_by_clauses or statement._distinct)
