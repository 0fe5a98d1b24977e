"""Tests for the query filter and the mixin query helpers."""

import pytest
from sqlalchemy import Column, ForeignKey, Integer, String, create_engine, select
from sqlalchemy.orm import declarative_base, relationship, sessionmaker

from softdeleteable.soft_delete import (
    BooleanSoftDeleteableMixin,
    SoftDeleteableFilter,
    SoftDeleteableListener,
    SoftDeleteableMixin,
)

Base = declarative_base()


class Post(Base, SoftDeleteableMixin):
    __tablename__ = "posts"

    id = Column(Integer, primary_key=True)
    title = Column(String(100))
    comments = relationship("Comment", back_populates="post")


class Comment(Base, SoftDeleteableMixin):
    __tablename__ = "comments"

    id = Column(Integer, primary_key=True)
    body = Column(String(200))
    post_id = Column(Integer, ForeignKey("posts.id"))
    post = relationship("Post", back_populates="comments")


class Tag(Base, BooleanSoftDeleteableMixin):
    __tablename__ = "tags"

    id = Column(Integer, primary_key=True)
    name = Column(String(50))


class Author(Base):
    __tablename__ = "authors"

    id = Column(Integer, primary_key=True)
    name = Column(String(50))


@pytest.fixture
def session_factory():
    engine = create_engine("sqlite:///:memory:")
    Base.metadata.create_all(engine)
    Session = sessionmaker(bind=engine)
    SoftDeleteableListener().register(Session)

    yield Session

    engine.dispose()


@pytest.fixture
def soft_filter(session_factory):
    soft_filter = SoftDeleteableFilter(Base)
    soft_filter.enable(session_factory)
    return soft_filter


@pytest.fixture
def populated(session_factory):
    """Two posts and two tags, one of each soft deleted."""
    session = session_factory()
    kept = Post(title="kept")
    gone = Post(title="gone")
    session.add_all(
        [kept, gone, Tag(name="kept"), Tag(name="gone"), Author(name="Ada")]
    )
    session.commit()

    session.delete(gone)
    session.delete(session.query(Tag).filter_by(name="gone").one())
    session.commit()
    session.close()


class TestSoftDeleteableFilter:
    """Test hiding soft-deleted rows from ORM queries."""

    def test_soft_deleteable_classes(self, soft_filter):
        classes = soft_filter.soft_deleteable_classes()

        assert set(classes) == {Post, Comment, Tag}

    def test_hides_deleted_rows(self, session_factory, soft_filter, populated):
        session = session_factory()

        assert [p.title for p in session.query(Post).all()] == ["kept"]
        assert [t.name for t in session.scalars(select(Tag)).all()] == ["kept"]
        # Classes without soft delete are not filtered
        assert session.query(Author).count() == 1
        session.close()

    def test_include_deleted_option(self, session_factory, soft_filter, populated):
        session = session_factory()

        posts = (
            session.query(Post)
            .execution_options(include_deleted=True)
            .order_by(Post.id)
            .all()
        )

        assert [p.title for p in posts] == ["kept", "gone"]
        session.close()

    def test_relationship_loads_are_filtered(self, session_factory, soft_filter):
        session = session_factory()
        post = Post(title="thread")
        post.comments = [Comment(body="visible"), Comment(body="hidden")]
        session.add(post)
        session.commit()

        session.delete(post.comments[1])
        session.commit()
        session.close()

        session = session_factory()
        post = session.query(Post).one()
        assert [c.body for c in post.comments] == ["visible"]
        session.close()

    def test_disable(self, session_factory, soft_filter, populated):
        soft_filter.disable(session_factory)
        session = session_factory()

        assert session.query(Post).count() == 2
        session.close()

    def test_without_filter_everything_is_visible(self, session_factory, populated):
        session = session_factory()

        assert session.query(Post).count() == 2
        assert session.query(Tag).count() == 2
        session.close()


class TestMixinHelpers:
    """Test the query helpers and restore on the mixins."""

    def test_query_methods(self, session_factory, populated):
        session = session_factory()

        assert [p.title for p in Post.query_active(session).all()] == ["kept"]
        assert [p.title for p in Post.query_deleted(session).all()] == ["gone"]
        assert Post.query_all(session).count() == 2

        assert [t.name for t in Tag.query_active(session).all()] == ["kept"]
        assert [t.name for t in Tag.query_deleted(session).all()] == ["gone"]
        session.close()

    def test_query_all_bypasses_filter(self, session_factory, soft_filter, populated):
        session = session_factory()

        assert len(Post.query_all(session).all()) == 2
        # Both criteria apply, so nothing matches
        assert Post.query_deleted(session).all() == []
        session.close()

    def test_restore_datetime_marker(self, session_factory, populated):
        session = session_factory()
        gone = Post.query_deleted(session).one()
        assert gone.is_soft_deleted is True

        gone.restore()
        session.commit()

        assert gone.deleted_at is None
        assert gone.is_soft_deleted is False
        assert Post.query_active(session).count() == 2
        session.close()

    def test_restore_boolean_marker(self, session_factory, populated):
        session = session_factory()
        gone = Tag.query_deleted(session).one()

        gone.restore()
        session.commit()

        assert gone.is_deleted is False
        assert Tag.query_deleted(session).count() == 0
        session.close()

    def test_restored_record_can_be_soft_deleted_again(
        self, session_factory, populated
    ):
        session = session_factory()
        gone = Post.query_deleted(session).one()
        gone.restore()
        session.commit()

        session.delete(gone)
        session.commit()

        assert gone.is_soft_deleted is True
        assert Post.query_all(session).count() == 2
        session.close()
