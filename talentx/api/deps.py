"""Request dependencies: store session, acting user, services."""
from dataclasses import dataclass
from typing import Generator, Optional

from fastapi import Depends, Header, HTTPException, Request
from sqlalchemy.orm import Session

from talentx.matching.ranking import RankingService


@dataclass(frozen=True)
class Actor:
    """Authenticated caller as handed over by the access-control guard."""

    id: str
    role: str


def get_db(request: Request) -> Generator[Session, None, None]:
    """One session per request; services commit their own units of work."""
    session = request.app.state.session_factory()
    try:
        yield session
    finally:
        session.close()


def get_read_db(request: Request) -> Generator[Session, None, None]:
    """Session for endpoints that only read; never waits on writers."""
    session = request.app.state.read_session_factory()
    try:
        yield session
    finally:
        session.close()


def get_actor(
    x_actor_id: Optional[str] = Header(None),
    x_actor_role: Optional[str] = Header(None),
) -> Actor:
    """Read the caller identity set by the upstream guard."""
    if not x_actor_id or not x_actor_role:
        raise HTTPException(status_code=401, detail="Authentication required")
    return Actor(id=x_actor_id, role=x_actor_role)


def require_role(role: str):
    """Dependency factory restricting an endpoint to one role."""

    def dependency(actor: Actor = Depends(get_actor)) -> Actor:
        if actor.role != role:
            raise HTTPException(status_code=403, detail="Access denied")
        return actor

    return dependency


require_talent = require_role("talent")
require_employer = require_role("employer")


def get_ranking_service(request: Request, db: Session = Depends(get_read_db)) -> RankingService:
    config = request.app.state.settings
    return RankingService(
        db,
        request.app.state.scorer,
        min_score=config.match_min_score,
        limit=config.match_limit,
        max_workers=config.scoring_max_workers,
    )
