#!/usr/bin/env python3
"""
Soft Delete Example - SoftDeleteable

Demonstrates:
- Turning session.delete() into a marker update
- Timestamp and flag markers
- pre/post soft delete notifications
- Hiding soft-deleted rows from queries
- Physically deleting rows that are already soft deleted
"""

import logging

from sqlalchemy import Column, DateTime, Integer, String, create_engine
from sqlalchemy.orm import declarative_base, sessionmaker

from softdeleteable import (
    BooleanSoftDeleteableMixin,
    SoftDeleteableFilter,
    SoftDeleteableMixin,
    SoftDeleteEvent,
    get_event_manager,
    hard_delete,
    register_soft_delete_listener,
)

Base = declarative_base()


class Comment(Base, SoftDeleteableMixin):
    """Comment kept with a deleted_at timestamp."""

    __tablename__ = "comments"

    id = Column(Integer, primary_key=True)
    body = Column(String(200), nullable=False)


class Tag(Base, BooleanSoftDeleteableMixin):
    """Tag kept with an is_deleted flag."""

    __tablename__ = "tags"

    id = Column(Integer, primary_key=True)
    name = Column(String(50), nullable=False)


class LogEntry(Base):
    """Log entries are always removed for good."""

    __tablename__ = "log_entries"

    id = Column(Integer, primary_key=True)
    message = Column(String(200))
    deleted_at = Column(DateTime, nullable=True)


def demonstrate_soft_delete() -> None:
    """Show soft delete functionality."""
    print("Soft Delete Example\n")

    logging.basicConfig(level=logging.INFO, format="  [%(name)s] %(message)s")

    # Setup database
    engine = create_engine("sqlite:///:memory:")
    Base.metadata.create_all(engine)
    Session = sessionmaker(bind=engine)
    register_soft_delete_listener(Session)

    events = get_event_manager()

    @events.listens_for(SoftDeleteEvent.PRE_SOFT_DELETE)
    def before(args):
        print(f"  -> about to soft delete {args.entity_type} {args.entity.id}")

    @events.listens_for(SoftDeleteEvent.POST_SOFT_DELETE)
    def after(args):
        print(f"  <- {args.entity_type} {args.entity.id} kept as an update")

    session = Session()

    # 1. Create test data
    print("1. Creating Test Data:")
    comment = Comment(body="Great write-up!")
    tag = Tag(name="sqlalchemy")
    entry = LogEntry(message="user logged in")
    session.add_all([comment, tag, entry])
    session.commit()
    print("  Created one comment, one tag and one log entry\n")

    # 2. Delete everything
    print("2. Deleting Records:")
    for obj in (comment, tag, entry):
        session.delete(obj)
    session.commit()

    print(f"  Comment deleted_at: {comment.deleted_at}")
    print(f"  Tag is_deleted: {tag.is_deleted}")
    print(f"  Log entries left: {session.query(LogEntry).count()}\n")

    # 3. Hide soft-deleted rows
    print("3. Query Filter:")
    soft_filter = SoftDeleteableFilter(Base)
    soft_filter.enable(Session)
    session = Session()

    visible = session.query(Comment).all()
    everything = session.query(Comment).execution_options(include_deleted=True).all()
    print(f"  Visible comments: {len(visible)}")
    print(f"  Comments including deleted: {len(everything)}\n")

    # 4. Deleting a soft-deleted row removes it
    print("4. Physical Delete:")
    comment = everything[0]
    session.delete(comment)
    session.commit()
    print(
        "  Comments left: "
        f"{session.query(Comment).execution_options(include_deleted=True).count()}"
    )

    # 5. Skip the rewrite explicitly
    tag = session.query(Tag).execution_options(include_deleted=True).one()
    tag.restore()
    session.commit()
    with hard_delete(session):
        session.delete(tag)
        session.commit()
    print(f"  Tags left after hard_delete(): {session.query(Tag).count()}")

    print("\nSoft delete example completed!")


if __name__ == "__main__":
    demonstrate_soft_delete()
