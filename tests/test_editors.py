# =============================================================================
# tests/test_editors.py - Record Editor Tests
# =============================================================================
# Scenario tests for the edit-session state machine against in-memory
# storage and tables (see conftest.py). Async methods are driven with
# asyncio.run.
#
# Run with: pytest tests/test_editors.py -v
# =============================================================================

import asyncio
import json

import pytest

from app.exceptions import (
    EditorStateError,
    FormValidationError,
    PersistError,
    UploadFailedError,
)
from core.services.editors import (
    EditorState,
    GalleryEditor,
    PendingUpload,
    ProductEditor,
    StoryEditor,
    TeamMemberEditor,
)
from tests.conftest import PUBLIC_BASE


def png(name: str) -> PendingUpload:
    return PendingUpload(name, f"bytes of {name}".encode(), "image/png")


# =============================================================================
# Gallery
# =============================================================================

class TestGalleryScenario:
    """The add / re-fetch / delete lifecycle of a gallery project."""

    def test_sofa_set_end_to_end(self, storage, make_store):
        """Test adding a two-image project, reading it back and deleting it."""
        store = make_store("gallery")
        editor = GalleryEditor(storage, store=store)

        # Add with two files
        editor.begin_add()
        editor.attach([png("sofa front.png"), png("sofa side.png")])
        saved = asyncio.run(editor.submit({"title": "Sofa Set", "description": "Three-seater in teal"}))

        assert len(storage.uploads) == 2
        assert editor.state is EditorState.VIEWING

        # Row holds a 2-element JSON array of storage paths, in attach order
        row = store.rows[0]
        paths = json.loads(row["media"])
        assert len(paths) == 2
        assert paths[0].startswith("gallery/") and paths[0].endswith("-sofa-front.png")
        assert paths[1].startswith("gallery/") and paths[1].endswith("-sofa-side.png")
        assert set(paths) == set(storage.objects)
        assert row["type"] == "image"
        assert row["size"] == "medium"
        assert saved["title"] == "Sofa Set"

        # Re-fetch renders two resolved URLs in the same order
        fetched = editor.present(editor.fetch(row["id"]))
        assert [m["url"] for m in fetched["media"]] == [f"{PUBLIC_BASE}/{p}" for p in paths]
        assert [m["raw"] for m in fetched["media"]] == paths

        # Delete removes both paths and the row
        cleanup = asyncio.run(editor.delete(editor.fetch(row["id"])))

        assert storage.removed_paths == set(paths)
        assert cleanup.ok
        assert store.rows == []

    def test_delete_proceeds_when_storage_cleanup_fails(self, storage, make_store, sample_gallery_row):
        """Test that missing objects don't stop the row delete."""
        store = make_store("gallery", [sample_gallery_row])
        editor = GalleryEditor(storage, store=store)

        cleanup = asyncio.run(editor.delete(editor.fetch(7)))

        assert not cleanup.ok
        assert set(cleanup.failed) == {
            "gallery/1716197400000-corner.png",
            "gallery/1716197400001-detail.png",
        }
        assert store.rows == []

    def test_storage_is_cleaned_before_row_delete(self, storage, make_store, sample_gallery_row):
        """Test the order: storage first, then the row."""
        store = make_store("gallery", [sample_gallery_row])
        store.fail_on.add("delete")
        editor = GalleryEditor(storage, store=store)

        with pytest.raises(PersistError):
            asyncio.run(editor.delete(editor.fetch(7)))

        assert len(storage.remove_calls) == 1

    def test_edit_appends_and_removes_by_index(self, storage, make_store, sample_gallery_row):
        """Test that uploads append after kept media and dropped entries are deleted."""
        storage.objects.update({
            "gallery/1716197400000-corner.png": b"a",
            "gallery/1716197400001-detail.png": b"b",
        })
        store = make_store("gallery", [sample_gallery_row])
        editor = GalleryEditor(storage, store=store)

        editor.begin_edit(editor.fetch(7))
        removed = editor.remove_media(0)
        editor.attach([png("fabric.png")])
        saved = asyncio.run(editor.submit({}))

        stored = json.loads(store.rows[0]["media"])
        assert removed.raw == "gallery/1716197400000-corner.png"
        assert stored[0] == "gallery/1716197400001-detail.png"
        assert stored[1].endswith("-fabric.png")
        assert "gallery/1716197400000-corner.png" not in storage.objects
        assert [m["raw"] for m in saved["media"]] == stored

    def test_remove_only_writes_media(self, storage, make_store, sample_gallery_row):
        """Test that dropping the last entries writes Shape A."""
        store = make_store("gallery", [sample_gallery_row])
        editor = GalleryEditor(storage, store=store)

        editor.begin_edit(editor.fetch(7))
        editor.remove_media(1)
        editor.remove_media(0)
        asyncio.run(editor.submit({}))

        assert store.rows[0]["media"] is None
        assert storage.uploads == []

    def test_remove_out_of_range(self, storage, make_store, sample_gallery_row):
        """Test that a bad index is a validation error."""
        editor = GalleryEditor(storage, store=make_store("gallery", [sample_gallery_row]))
        editor.begin_edit(editor.fetch(7))

        with pytest.raises(FormValidationError):
            editor.remove_media(5)

    def test_invalid_choice(self, storage, make_store):
        """Test that type and size are checked against their choices."""
        editor = GalleryEditor(storage, store=make_store("gallery"))
        editor.begin_add()
        editor.attach([png("a.png")])

        with pytest.raises(FormValidationError) as exc_info:
            asyncio.run(editor.submit({"title": "x", "description": "y", "size": "huge"}))

        assert exc_info.value.details["missing"] == ["size"]
        assert storage.uploads == []

    def test_edit_row_missing_choice_columns(self, storage, make_store):
        """Test that an older row without type or size can still be retitled."""
        row = {"id": 9, "title": "Dining Set", "description": "Teak", "media": None}
        store = make_store("gallery", [row])
        editor = GalleryEditor(storage, store=store)

        editor.begin_edit(editor.fetch(9))
        saved = asyncio.run(editor.submit({"title": "Dining Set (8 seater)"}))

        assert saved["title"] == "Dining Set (8 seater)"
        assert "size" not in store.rows[0]

    def test_edit_still_checks_changed_choice(self, storage, make_store, sample_gallery_row):
        editor = GalleryEditor(storage, store=make_store("gallery", [sample_gallery_row]))
        editor.begin_edit(editor.fetch(7))

        with pytest.raises(FormValidationError) as exc_info:
            asyncio.run(editor.submit({"size": "huge"}))

        assert exc_info.value.details["missing"] == ["size"]


# =============================================================================
# Team members
# =============================================================================

class TestTeamMemberEditor:
    """Tests for TeamMemberEditor."""

    def test_edit_without_file_keeps_image(self, storage, make_store, sample_team_row):
        """Test that editing without a new file leaves image_url alone and uploads nothing."""
        store = make_store("team_members", [sample_team_row])
        editor = TeamMemberEditor(storage, store=store)

        editor.begin_edit(editor.fetch(3))
        saved = asyncio.run(editor.submit({"name": "Ravi K.", "role": "Lead Designer"}))

        assert storage.uploads == []
        assert store.rows[0]["image_url"] == sample_team_row["image_url"]
        update_row = [payload for name, payload in store.calls if name == "update"][0]
        assert "image_url" not in update_row
        assert saved["name"] == "Ravi K."
        assert saved["media"][0]["kind"] == "remoteUrl"

    def test_new_file_replaces_and_cleans_old(self, storage, make_store, sample_team_row):
        """Test that a new portrait replaces the old one, which is then deleted."""
        storage.objects["team-members/1698926400000-ravi.jpg"] = b"old"
        store = make_store("team_members", [sample_team_row])
        editor = TeamMemberEditor(storage, store=store)

        editor.begin_edit(editor.fetch(3))
        editor.attach([png("ravi new.png")])
        asyncio.run(editor.submit({}))

        stored = json.loads(store.rows[0]["image_url"])
        assert len(stored) == 1 and stored[0].startswith("team-members/")
        assert "team-members/1698926400000-ravi.jpg" not in storage.objects

    def test_single_file_only(self, storage, make_store):
        """Test that a second file is rejected."""
        editor = TeamMemberEditor(storage, store=make_store("team_members"))
        editor.begin_add()

        with pytest.raises(FormValidationError):
            editor.attach([png("a.png"), png("b.png")])


# =============================================================================
# Failure handling
# =============================================================================

class TestSubmitFailures:
    """Tests for validation, upload and persist failures."""

    def test_validation_happens_before_any_call(self, storage, make_store):
        """Test that missing fields raise with no upload and no store call."""
        store = make_store("gallery")
        editor = GalleryEditor(storage, store=store)
        editor.begin_add()
        editor.attach([png("a.png")])

        with pytest.raises(FormValidationError) as exc_info:
            asyncio.run(editor.submit({"title": "Sofa Set"}))

        assert exc_info.value.details["missing"] == ["description"]
        assert storage.uploads == []
        assert store.calls == []
        assert editor.state is EditorState.EDITING_NEW

    def test_media_required_on_add(self, storage, make_store):
        """Test that a new record needs at least one file."""
        editor = StoryEditor(storage, store=make_store("stories"))
        editor.begin_add()

        with pytest.raises(FormValidationError) as exc_info:
            asyncio.run(editor.submit({"title": "Diwali sale", "description": "20% off"}))

        assert exc_info.value.details["missing"] == ["media"]

    def test_upload_failure_keeps_editing_state(self, storage, make_store):
        """Test that one failed upload aborts the submit and nothing is written."""
        storage.fail_uploads.add("broken")
        store = make_store("gallery")
        editor = GalleryEditor(storage, store=store)
        editor.begin_add()
        editor.attach([png("good.png"), png("broken.png")])

        with pytest.raises(UploadFailedError):
            asyncio.run(editor.submit({"title": "Sofa Set", "description": "Teal"}))

        assert editor.state is EditorState.EDITING_NEW
        assert [p.filename for p in editor.pending] == ["good.png", "broken.png"]
        assert "insert" not in store.operations()
        # The upload that did succeed is not left behind
        assert storage.objects == {}

    def test_retry_after_upload_failure(self, storage, make_store):
        """Test that the same session can be resubmitted once storage recovers."""
        storage.fail_uploads.add("broken")
        store = make_store("gallery")
        editor = GalleryEditor(storage, store=store)
        editor.begin_add()
        editor.attach([png("broken.png")])
        form = {"title": "Sofa Set", "description": "Teal"}

        with pytest.raises(UploadFailedError):
            asyncio.run(editor.submit(form))
        storage.fail_uploads.clear()
        asyncio.run(editor.submit(form))

        assert len(store.rows) == 1
        assert editor.state is EditorState.VIEWING

    def test_persist_failure_keeps_editing_state(self, storage, make_store, sample_team_row):
        """Test that a rejected write restores the edit and removes fresh uploads."""
        store = make_store("team_members", [sample_team_row])
        store.fail_on.add("update")
        editor = TeamMemberEditor(storage, store=store)
        editor.begin_edit(editor.fetch(3))
        editor.attach([png("new.png")])

        with pytest.raises(PersistError):
            asyncio.run(editor.submit({"role": "Manager"}))

        assert editor.state is EditorState.EDITING_EXISTING
        assert len(editor.pending) == 1
        assert storage.objects == {}
        assert store.rows[0]["role"] == "Designer"

    def test_double_submit_is_rejected(self, storage, make_store):
        """Test that a second submit while one is in flight raises."""
        store = make_store("gallery")
        editor = GalleryEditor(storage, store=store)
        editor.begin_add()
        editor.attach([png("a.png")])
        form = {"title": "Sofa Set", "description": "Teal"}

        async def submit_twice():
            return await asyncio.gather(
                editor.submit(form),
                editor.submit(form),
                return_exceptions=True,
            )

        first, second = asyncio.run(submit_twice())

        assert isinstance(first, dict)
        assert isinstance(second, EditorStateError)
        assert store.operations().count("insert") == 1


# =============================================================================
# Transitions
# =============================================================================

class TestTransitions:
    """Tests for the state machine itself."""

    def test_cancel_discards_working_state(self, storage, make_store):
        editor = GalleryEditor(storage, store=make_store("gallery"))
        editor.begin_add()
        editor.attach([png("a.png")])

        editor.cancel()

        assert editor.state is EditorState.VIEWING
        assert editor.pending == []
        assert editor.media.is_empty

    def test_cannot_begin_twice(self, storage, make_store):
        editor = GalleryEditor(storage, store=make_store("gallery"))
        editor.begin_add()

        with pytest.raises(EditorStateError):
            editor.begin_add()

    def test_cannot_attach_while_viewing(self, storage, make_store):
        editor = GalleryEditor(storage, store=make_store("gallery"))

        with pytest.raises(EditorStateError):
            editor.attach([png("a.png")])

    def test_submit_requires_editing(self, storage, make_store):
        editor = GalleryEditor(storage, store=make_store("gallery"))

        with pytest.raises(EditorStateError):
            asyncio.run(editor.submit({}))

    def test_delete_requires_viewing(self, storage, make_store, sample_gallery_row):
        editor = GalleryEditor(storage, store=make_store("gallery", [sample_gallery_row]))
        editor.begin_edit(editor.fetch(7))

        with pytest.raises(EditorStateError):
            asyncio.run(editor.delete(sample_gallery_row))

    def test_begin_edit_normalizes_media(self, storage, make_store, sample_gallery_row):
        editor = GalleryEditor(storage, store=make_store("gallery", [sample_gallery_row]))

        editor.begin_edit(editor.fetch(7))

        assert editor.state is EditorState.EDITING_EXISTING
        assert len(editor.media) == 2


# =============================================================================
# Products
# =============================================================================

class TestProductEditor:
    """Tests for ProductEditor."""

    def test_create_writes_images_and_legacy_image(self, storage, make_store):
        """Test both product media columns on insert."""
        store = make_store("products")
        editor = ProductEditor(storage, store=store)
        editor.begin_add()
        editor.attach([png("desk.png"), png("desk side.png")])

        saved = asyncio.run(editor.submit({"name": "Oak Desk", "price": "1299", "category": "Office"}))

        row = store.rows[0]
        images = json.loads(row["images"])
        assert len(images) == 2
        assert row["legacy_image"] == images[0]
        assert row["price"] == 1299
        assert saved["media_source"] == "images"

    @pytest.mark.parametrize("form, field", [
        ({"name": "Desk", "price": "abc", "category": "Office"}, "price"),
        ({"name": "Desk", "price": "-5", "category": "Office"}, "price"),
        ({"name": "Desk", "price": "nan", "category": "Office"}, "price"),
        ({"name": "Desk", "price": "inf", "category": "Office"}, "price"),
        ({"name": "Desk", "price": "10", "category": "Garden"}, "category"),
    ])
    def test_invalid_fields(self, storage, make_store, form, field):
        editor = ProductEditor(storage, store=make_store("products"))
        editor.begin_add()
        editor.attach([png("desk.png")])

        with pytest.raises(FormValidationError) as exc_info:
            asyncio.run(editor.submit(form))

        assert exc_info.value.details["missing"] == [field]

    def test_reads_legacy_column_when_images_absent(self, storage, make_store):
        """Test the fallback to legacy_image, then image."""
        editor = ProductEditor(storage, store=make_store("products"))

        legacy = editor.present({"id": 1, "images": None, "legacy_image": "https://old.cdn/products/sofa.jpg"})
        oldest = editor.present({"id": 2, "images": "", "legacy_image": None, "image": "products/bed.png"})
        current = editor.present({
            "id": 3,
            "images": '["products/1-a.png"]',
            "legacy_image": "https://old.cdn/products/other.jpg",
        })

        assert legacy["media_source"] == "legacy_image"
        assert legacy["media"][0]["url"] == "https://old.cdn/products/sofa.jpg"
        assert oldest["media_source"] == "image"
        assert current["media_source"] == "images"
        assert [m["raw"] for m in current["media"]] == ["products/1-a.png"]

    def test_delete_cleans_every_media_column(self, storage, make_store):
        """Test that delete covers images, legacy_image and image."""
        row = {
            "id": 4,
            "name": "Bed",
            "images": '["products/1-a.png"]',
            "legacy_image": "products/1-a.png",
            "image": "https://old.cdn/uploads/legacy.jpg",
        }
        store = make_store("products", [row])
        editor = ProductEditor(storage, store=store)

        asyncio.run(editor.delete(editor.fetch(4)))

        assert storage.removed_paths == {"products/1-a.png", "products/legacy.jpg"}
        assert store.rows == []

    def test_edit_price_only(self, storage, make_store):
        """Test a partial edit of a legacy product keeps its media columns."""
        row = {"id": 5, "name": "Lamp", "price": 40, "category": "Outdoor", "legacy_image": "products/lamp.png"}
        store = make_store("products", [row])
        editor = ProductEditor(storage, store=store)

        editor.begin_edit(editor.fetch(5))
        asyncio.run(editor.submit({"price": "45.5"}))

        assert store.rows[0]["price"] == 45.5
        assert store.rows[0]["legacy_image"] == "products/lamp.png"
        assert "images" not in store.rows[0]

    def test_emptied_product_stays_empty(self, storage, make_store):
        """Test that removing the last image doesn't expose the oldest column again."""
        row = {
            "id": 6,
            "name": "Chair",
            "price": 300,
            "category": "Office",
            "images": '["products/2-new.png"]',
            "legacy_image": "products/2-new.png",
            "image": "products/1-old.png",
        }
        store = make_store("products", [row])
        editor = ProductEditor(storage, store=store)

        editor.begin_edit(editor.fetch(6))
        editor.remove_media(0)
        asyncio.run(editor.submit({}))

        stored = store.rows[0]
        assert stored["images"] is None
        assert stored["legacy_image"] is None
        assert stored["image"] is None
        assert editor.present(stored)["media"] == []


# =============================================================================
# Stories
# =============================================================================

class TestStoryEditor:
    """Tests for StoryEditor."""

    def test_blank_expiry_is_none(self, storage, make_store):
        store = make_store("stories")
        editor = StoryEditor(storage, store=store)
        editor.begin_add()
        editor.attach([PendingUpload("promo.mp4", b"video", "video/mp4")])

        saved = asyncio.run(editor.submit({"title": "Sale", "description": "Big sale", "expires_at": ""}))

        assert store.rows[0]["expires_at"] is None
        assert saved["media"][0]["is_video"] is True

    def test_bad_expiry(self, storage, make_store):
        editor = StoryEditor(storage, store=make_store("stories"))
        editor.begin_add()
        editor.attach([png("promo.png")])

        with pytest.raises(FormValidationError):
            asyncio.run(editor.submit({"title": "Sale", "description": "x", "expires_at": "next week"}))
