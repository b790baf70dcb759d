"""Seed the role catalogue and optionally invite a first superadmin."""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from sqlalchemy import func, select
from sqlalchemy.orm import Session

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from transfer_agent.db.session import get_session
from transfer_agent.models import InvitedUser, Role, RoleName
from transfer_agent.services.access import role_display_name

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def seed_roles(session: Session) -> None:
    existing = {role.role_name: role for role in session.scalars(select(Role))}
    for role_name in RoleName:
        role = existing.get(role_name.value)
        if role is None:
            session.add(Role(role_name=role_name.value, display_name=role_display_name(role_name.value)))
            logger.info("Added role %s", role_name.value)
        elif not role.display_name:
            role.display_name = role_display_name(role_name.value)
            logger.info("Filled display name for role %s", role_name.value)
    session.flush()


def invite_superadmin(session: Session, email: str, name: str | None = None) -> None:
    already = session.scalars(
        select(InvitedUser.id).where(func.lower(InvitedUser.email) == email.lower())
    ).first()
    if already is not None:
        logger.info("Invitation for %s already exists", email)
        return
    role = session.scalars(select(Role).where(Role.role_name == RoleName.SUPERADMIN.value)).one()
    session.add(InvitedUser(email=email, name=name, role_id=role.id, issuer_id=None))
    logger.info("Invited %s as superadmin", email)


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--superadmin-email", help="email to invite with the superadmin role")
    parser.add_argument("--superadmin-name", default=None)
    args = parser.parse_args()

    with get_session() as session:
        seed_roles(session)
        if args.superadmin_email:
            invite_superadmin(session, args.superadmin_email, args.superadmin_name)


if __name__ == "__main__":
    main()
