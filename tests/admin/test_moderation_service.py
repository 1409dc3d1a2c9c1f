import pytest

from manupedia.core.config import settings
from manupedia.models import ManuscriptStatus
from manupedia.services.exceptions import NotFoundError, ValidationError
from manupedia.services.moderation_service import parse_status
from tests.helpers import make_fields, png_attachment


@pytest.fixture
def manuscript(manuscript_service, owner):
    return manuscript_service.create_manuscript(make_fields(), owner.id, png_attachment())


@pytest.mark.parametrize("token", ["PENDING", "APPROVED", "REJECTED"])
def test_parse_status_accepts_exact_tokens(token):
    assert parse_status(token) == ManuscriptStatus(token)


@pytest.mark.parametrize("token", ["INVALID", "approved", "Approved", " APPROVED", "", None])
def test_parse_status_rejects_anything_else(token):
    with pytest.raises(ValidationError):
        parse_status(token)


class TestSetStatus:

    def test_approve(self, moderation_service, manuscript):
        updated = moderation_service.set_status(manuscript.id, "APPROVED")

        assert updated.status == ManuscriptStatus.APPROVED
        assert updated.last_modified > manuscript.last_modified

    def test_invalid_token_leaves_record_untouched(self, moderation_service, manuscript_service, manuscript):
        with pytest.raises(ValidationError):
            moderation_service.set_status(manuscript.id, "INVALID")
        with pytest.raises(ValidationError):
            moderation_service.set_status(manuscript.id, "approved")

        assert manuscript_service.get_manuscript(manuscript.id).status == ManuscriptStatus.PENDING

    def test_missing_manuscript(self, moderation_service):
        with pytest.raises(NotFoundError):
            moderation_service.set_status(404, "APPROVED")

    def test_any_transition_is_allowed(self, moderation_service, manuscript):
        moderation_service.set_status(manuscript.id, "REJECTED")
        moderation_service.set_status(manuscript.id, "APPROVED")
        updated = moderation_service.set_status(manuscript.id, "PENDING")

        assert updated.status == ManuscriptStatus.PENDING


class TestToggleFeatured:

    def test_toggle_twice_restores_flag(self, moderation_service, manuscript):
        assert moderation_service.toggle_featured(manuscript.id).featured is True
        assert moderation_service.toggle_featured(manuscript.id).featured is False

    def test_toggle_does_not_touch_last_modified(self, moderation_service, manuscript):
        toggled = moderation_service.toggle_featured(manuscript.id)
        assert toggled.last_modified == manuscript.last_modified

    def test_toggle_missing_manuscript(self, moderation_service):
        with pytest.raises(NotFoundError):
            moderation_service.toggle_featured(404)


class TestDeleteAsAdmin:

    def test_deletes_any_owners_record_and_image(self, moderation_service, manuscript_service, blob_store, manuscript):
        moderation_service.delete_as_admin(manuscript.id)

        with pytest.raises(NotFoundError):
            manuscript_service.get_manuscript(manuscript.id)
        assert list(blob_store.root.iterdir()) == []

    def test_delete_missing_manuscript(self, moderation_service):
        with pytest.raises(NotFoundError):
            moderation_service.delete_as_admin(404)


class TestListForAdmin:

    def test_lists_every_owner_most_recently_modified_first(self, moderation_service, manuscript_service, owner, other_user):
        first = manuscript_service.create_manuscript(make_fields(title="First"), owner.id)
        manuscript_service.create_manuscript(make_fields(title="Second"), other_user.id)
        moderation_service.set_status(first.id, "APPROVED")

        items, total = moderation_service.list_for_admin()

        assert total == 2
        assert [m.title for m in items] == ["First", "Second"]

    def test_status_filter(self, moderation_service, manuscript_service, owner):
        a = manuscript_service.create_manuscript(make_fields(title="A"), owner.id)
        manuscript_service.create_manuscript(make_fields(title="B"), owner.id)
        moderation_service.set_status(a.id, "REJECTED")

        items, total = moderation_service.list_for_admin(status="REJECTED")
        assert total == 1
        assert items[0].title == "A"

        _, total = moderation_service.list_for_admin(status="PENDING")
        assert total == 1

    def test_invalid_status_filter(self, moderation_service):
        with pytest.raises(ValidationError):
            moderation_service.list_for_admin(status="pending")

    def test_default_page_size(self, moderation_service, manuscript_service, owner, monkeypatch):
        monkeypatch.setattr(settings, "ADMIN_DEFAULT_PAGE_SIZE", 2)
        for i in range(3):
            manuscript_service.create_manuscript(make_fields(title=f"Folio {i}"), owner.id)

        items, total = moderation_service.list_for_admin()
        assert len(items) == 2
        assert total == 3
