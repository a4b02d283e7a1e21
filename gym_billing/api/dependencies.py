"""Dependency injection and lookup helpers for FastAPI endpoints"""

import uuid
from fastapi import Depends, HTTPException, Request
from sqlalchemy.orm import Session

from gym_billing.infrastructure.database.models import Member
from gym_billing.infrastructure.database.repositories import MemberRepository
from gym_billing.infrastructure.database.session import get_db


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def parse_uuid(value: str, label: str) -> uuid.UUID:
    try:
        return uuid.UUID(value)
    except ValueError:
        raise HTTPException(status_code=400, detail=f"Invalid {label} ID format")


def get_member_or_404(member_id: str, db: Session = Depends(get_db)) -> Member:
    """Resolve the {member_id} path parameter to a Member row"""
    member = MemberRepository(db).get_member_by_id(parse_uuid(member_id, "member"))
    if not member:
        raise HTTPException(status_code=404, detail="Member not found")
    return member
