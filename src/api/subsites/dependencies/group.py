from typing import Annotated

from fastapi import Depends, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from infrastructure.database.dependencies import get_session
from infrastructure.settings import SubsiteSettings, get_subsite_settings
from shared_kernel.authorization.protocols import SubsiteAccessProvider
from shared_kernel.middleware.subsite_context import SubsiteContext
from subsites.application.access import GroupAccessEvaluator
from subsites.application.lifecycle import GroupLifecycleHooks
from subsites.application.services import GroupService
from subsites.dependencies.subsite_context import get_subsite_context
from subsites.infrastructure.group_repository import GroupRepository
from subsites.infrastructure.query_scope import GroupQueryScope, ScopeOptions


def get_subsite_access_provider(request: Request) -> SubsiteAccessProvider:
    """Get the capability lookup registered on the application.

    Raises:
        HTTPException 503: If the host application did not register one
    """
    provider = getattr(request.app.state, "subsite_access_provider", None)
    if provider is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Subsite access lookup is not configured",
        )
    return provider


def get_group_query_scope(
    context: Annotated[SubsiteContext, Depends(get_subsite_context)],
    settings: Annotated[SubsiteSettings, Depends(get_subsite_settings)],
) -> GroupQueryScope:
    """Get a GroupQueryScope bound to this request's subsite context."""
    return GroupQueryScope(
        options=ScopeOptions.from_settings(settings),
        context_provider=lambda: context,
    )


def get_group_repository(
    session: Annotated[AsyncSession, Depends(get_session)],
    scope: Annotated[GroupQueryScope, Depends(get_group_query_scope)],
) -> GroupRepository:
    """Get GroupRepository instance.

    Args:
        session: Async database session
        scope: Query scope for the request's subsite

    Returns:
        GroupRepository instance
    """
    return GroupRepository(session=session, scope=scope)


def get_group_access_evaluator(
    provider: Annotated[SubsiteAccessProvider, Depends(get_subsite_access_provider)],
    settings: Annotated[SubsiteSettings, Depends(get_subsite_settings)],
) -> GroupAccessEvaluator:
    """Get GroupAccessEvaluator using the configured edit permission."""
    return GroupAccessEvaluator(
        access_provider=provider,
        edit_permission=settings.edit_permission,
    )


def get_group_service(
    group_repo: Annotated[GroupRepository, Depends(get_group_repository)],
    session: Annotated[AsyncSession, Depends(get_session)],
    evaluator: Annotated[GroupAccessEvaluator, Depends(get_group_access_evaluator)],
    context: Annotated[SubsiteContext, Depends(get_subsite_context)],
) -> GroupService:
    """Get GroupService instance.

    Args:
        group_repo: Group repository (shares session via FastAPI dependency caching)
        session: Database session for transaction management
        evaluator: Edit authorization for groups
        context: The request's subsite context

    Returns:
        GroupService instance
    """
    return GroupService(
        session=session,
        group_repository=group_repo,
        access_evaluator=evaluator,
        lifecycle=GroupLifecycleHooks(context_provider=lambda: context),
        context_provider=lambda: context,
    )
