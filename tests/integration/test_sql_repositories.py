"""Integration tests for SQL repositories on sqlite."""

import uuid

import pytest
from sqlalchemy import event
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, sessionmaker

from backend.app.db.context import RequestContext
from backend.app.db.models import Share
from backend.app.db.sql_repositories import SqlDocumentRepository, SqlShareRepository, SqlVersionRepository
from backend.app.publishing.service import PublishService
from backend.app.templates.seeds import seed_bubble, seed_carousel

CTX = RequestContext(user_id="user-1")
OTHER = RequestContext(user_id="user-2")


def test_document_crud_with_ownership(sqlite_session_factory: sessionmaker[Session]) -> None:
    """Test create, read, save and delete scoped to the owner."""
    with sqlite_session_factory() as session:
        repo = SqlDocumentRepository(session)

        record = repo.create(seed_bubble("Promo"), CTX)
        assert record.title == "Promo"
        assert record.status == "publishable"

        fetched = repo.get(record.doc_id, CTX)
        assert fetched is not None
        assert fetched.document().title == "Promo"
        assert repo.get(record.doc_id, OTHER) is None

        edited = fetched.document()
        edited.section.body[0].text = ""
        saved = repo.save(record.doc_id, edited, CTX)
        assert saved is not None
        assert saved.status == "draft"
        assert repo.save(record.doc_id, edited, OTHER) is None

        assert [r.doc_id for r in repo.list(CTX)] == [record.doc_id]
        assert repo.list(OTHER) == []

        assert not repo.delete(record.doc_id, OTHER)
        assert repo.delete(record.doc_id, CTX)
        assert repo.get(record.doc_id, CTX) is None


def test_versions_numbered_per_document(sqlite_session_factory: sessionmaker[Session]) -> None:
    with sqlite_session_factory() as session:
        docs = SqlDocumentRepository(session)
        versions = SqlVersionRepository(session)
        a = docs.create(seed_bubble(), CTX)
        b = docs.create(seed_bubble(), CTX)

        assert versions.append_version(a.doc_id, {"n": 1}, {}).version_no == 1
        assert versions.append_version(a.doc_id, {"n": 2}, {}).version_no == 2
        assert versions.append_version(b.doc_id, {"n": 1}, {}).version_no == 1

        assert versions.get_version(a.doc_id, 1).flex_json == {"n": 1}
        assert versions.latest_version(a.doc_id).version_no == 2
        assert versions.get_version(a.doc_id, 3) is None
        assert versions.latest_version(uuid.uuid4()) is None


def test_activate_token_swaps_active_share(sqlite_session_factory: sessionmaker[Session]) -> None:
    """Test that activating a token retires the previous one."""
    with sqlite_session_factory() as session:
        doc = SqlDocumentRepository(session).create(seed_bubble(), CTX)
        shares = SqlShareRepository(session)

        shares.activate_token(doc.doc_id, 1, "tok-1")
        shares.activate_token(doc.doc_id, 2, "tok-2")

        assert not shares.get_share("tok-1").is_active
        active = shares.get_active_share(doc.doc_id)
        assert active is not None
        assert (active.token, active.version_no) == ("tok-2", 2)
        assert shares.get_share("missing") is None


def test_partial_index_rejects_second_active_share(sqlite_session_factory: sessionmaker[Session]) -> None:
    """Test that the database itself refuses two active tokens for one document."""
    with sqlite_session_factory() as session:
        doc = SqlDocumentRepository(session).create(seed_bubble(), CTX)
        session.add(Share(token="a", doc_id=doc.doc_id, version_no=1, is_active=True))
        session.commit()

        session.add(Share(token="b", doc_id=doc.doc_id, version_no=2, is_active=True))
        with pytest.raises(IntegrityError):
            session.commit()
        session.rollback()

        session.add(Share(token="c", doc_id=doc.doc_id, version_no=2, is_active=False))
        session.commit()


def test_publish_service_on_sql(sqlite_session_factory: sessionmaker[Session]) -> None:
    """Test the full publish workflow against SQL repositories."""
    with sqlite_session_factory() as session:
        docs = SqlDocumentRepository(session)
        versions = SqlVersionRepository(session)
        shares = SqlShareRepository(session)
        record = docs.create(seed_carousel(3), CTX)
        service = PublishService(docs, versions)

        first = service.publish(record.doc_id, CTX)
        second = service.publish(record.doc_id, CTX)

        assert second.version_no == first.version_no + 1
        assert shares.get_active_share(record.doc_id).token == second.token
        assert len(versions.get_version(record.doc_id, 2).flex_json["contents"]["contents"]) == 3


def test_delete_cascades(sqlite_session_factory: sessionmaker[Session]) -> None:
    with sqlite_session_factory() as session:
        docs = SqlDocumentRepository(session)
        versions = SqlVersionRepository(session)
        shares = SqlShareRepository(session)
        record = docs.create(seed_bubble(), CTX)
        result = PublishService(docs, versions).publish(record.doc_id, CTX)

        assert docs.delete(record.doc_id, CTX)
        assert versions.latest_version(record.doc_id) is None
        assert shares.get_share(result.token) is None


def test_append_published_commits_version_and_share_once(
    sqlite_session_factory: sessionmaker[Session],
) -> None:
    """Test that the version and its active share land in a single commit."""
    with sqlite_session_factory() as session:
        doc = SqlDocumentRepository(session).create(seed_bubble(), CTX)
        versions = SqlVersionRepository(session)
        shares = SqlShareRepository(session)
        versions.append_published(doc.doc_id, {"n": 1}, {}, "tok-1")

        commits: list[Session] = []
        listener = commits.append
        event.listen(session, "after_commit", listener)
        version, share = versions.append_published(doc.doc_id, {"n": 2}, {}, "tok-2")
        event.remove(session, "after_commit", listener)

        assert len(commits) == 1
        assert (version.version_no, share.version_no, share.token) == (2, 2, "tok-2")
        assert shares.get_active_share(doc.doc_id).token == "tok-2"
        assert not shares.get_share("tok-1").is_active


def test_append_published_rolls_back_version_when_share_fails(
    sqlite_session_factory: sessionmaker[Session],
) -> None:
    """Test that a failed token insert leaves no orphan version behind."""
    with sqlite_session_factory() as session:
        docs = SqlDocumentRepository(session)
        versions = SqlVersionRepository(session)
        shares = SqlShareRepository(session)
        taken = docs.create(seed_bubble(), CTX)
        doc = docs.create(seed_bubble(), CTX)
        versions.append_published(taken.doc_id, {"n": 1}, {}, "tok-dup")
        # Only the database knows the token is taken
        session.expunge_all()

        with pytest.raises(IntegrityError):
            versions.append_published(doc.doc_id, {"n": 1}, {}, "tok-dup")

        assert versions.latest_version(doc.doc_id) is None
        assert shares.get_active_share(doc.doc_id) is None
        assert shares.get_share("tok-dup").doc_id == taken.doc_id


def test_update_applies_mutation_to_current_content(sqlite_session_factory: sessionmaker[Session]) -> None:
    """Test that update reads the latest stored content and recomputes status."""
    with sqlite_session_factory() as session:
        repo = SqlDocumentRepository(session)
        record = repo.create(seed_bubble("Before"), CTX)

        edited = record.document()
        edited.title = "Saved elsewhere"
        repo.save(record.doc_id, edited, CTX)

        def clear_title_text(doc):
            doc.section.body[0].text = ""
            return doc

        updated = repo.update(record.doc_id, clear_title_text, CTX)

        assert updated is not None
        assert updated.title == "Saved elsewhere"
        assert updated.status == "draft"
        assert repo.update(record.doc_id, clear_title_text, OTHER) is None
