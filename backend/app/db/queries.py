"""Ownership-safe query helpers."""

from sqlalchemy.orm import Query, Session

from backend.app.db.context import RequestContext
from backend.app.db.models import FlexDoc


def query_documents(session: Session, ctx: RequestContext) -> Query:
    """Query flex_doc table with owner scoping enforced.

    Args:
        session: SQLAlchemy session
        ctx: Request context with user_id

    Returns:
        Query filtered by owner_id
    """
    return session.query(FlexDoc).filter(FlexDoc.owner_id == ctx.user_id)
