"""
Unit tests for the content services: blogs, FAQs, popups and projects

Author: TM3
Date: 2026-02-10
"""
import pytest
from datetime import datetime, timedelta, timezone

from app.core.database import AUDIT_LOGS, BLOGS, FAQ_SETTINGS, HOME_POPUPS, PROJECTS
from app.core.exceptions import DocumentNotFoundException, StorageUploadException, ValidationFailedException
from app.domain.catalog import PopupAlignment, ProjectCategory
from app.domain.content import BlogDraft, BlogSection, BlogSeo, FaqDraft, PopupDraft, ProjectDraft
from app.services import popup_service
from app.services.blog_service import BlogService, make_slug
from app.services.faq_service import FaqService
from app.services.popup_service import PopupService
from app.services.project_service import ProjectService
from app.services.storage_service import UploadedFile

PNG = UploadedFile(b"png", "cover.png", "image/png")


def audit_entries(fake_db):
    return list(fake_db.docs(AUDIT_LOGS).values())


class TestMakeSlug:

    def test_strips_punctuation_and_hyphenates_spaces(self):
        assert make_slug("Solar 101: A Guide!") == "solar-101-a-guide"
        assert make_slug("Two   spaces") == "two-spaces"
        assert make_slug("") == ""


class TestBlogService:

    def test_create_uploads_images_and_defaults_seo(self, fake_db, fake_storage, actor):
        draft = BlogDraft(
            title="LED Retrofits in 2026",
            website="ecoshiftcorporation",
            sections=[
                BlogSection(id="s1", type="image-detail", title="Before"),
                BlogSection(id="s2", description="Plain text"),
            ],
        )

        blog_id = BlogService(fake_db, fake_storage).save_blog(
            draft, cover_file=PNG, section_files={"s1": UploadedFile(b"x", "before.jpg", "image/jpeg")}, actor=actor,
        )

        blog = fake_db.docs(BLOGS)[blog_id]
        assert blog["slug"] == "led-retrofits-in-2026"
        assert blog["seo"] == {"title": "LED Retrofits in 2026", "slug": "led-retrofits-in-2026", "description": ""}
        assert blog["coverImage"].endswith("/blogs/cover.png")
        assert blog["sections"][0]["imageUrl"].endswith("/blogs/before.jpg")
        assert "imageUrl" not in blog["sections"][1]
        assert blog["website"] == "ecoshiftcorporation"
        assert (blog["category"], blog["status"]) == ("Industry News", "Published")
        assert isinstance(blog["createdAt"], datetime)
        assert audit_entries(fake_db)[0]["action"] == "create"

    def test_explicit_seo_slug_wins(self, fake_db, fake_storage):
        draft = BlogDraft(title="Hello", coverImage="https://img/c.png", seo=BlogSeo(slug="custom-slug"))

        blog_id = BlogService(fake_db, fake_storage).save_blog(draft)

        assert fake_db.docs(BLOGS)[blog_id]["slug"] == "custom-slug"
        assert fake_storage.uploads == []

    def test_headline_and_cover_required(self, fake_db, fake_storage):
        service = BlogService(fake_db, fake_storage)

        with pytest.raises(ValidationFailedException, match="Headline and cover image are required."):
            service.save_blog(BlogDraft(title="   ", coverImage="https://img/c.png"))
        with pytest.raises(ValidationFailedException):
            service.save_blog(BlogDraft(title="No cover"))

    def test_failed_upload_saves_nothing(self, fake_db, fake_storage):
        fake_storage.fail = True

        with pytest.raises(StorageUploadException):
            BlogService(fake_db, fake_storage).save_blog(BlogDraft(title="Post"), cover_file=PNG)

        assert fake_db.docs(BLOGS) == {}

    def test_update_unknown_blog_raises(self, fake_db, fake_storage):
        with pytest.raises(DocumentNotFoundException):
            BlogService(fake_db, fake_storage).save_blog(
                BlogDraft(title="Post", coverImage="https://img/c.png"), editing_id="missing",
            )

    def test_list_filters_by_website_and_pages_by_five(self, fake_db, fake_storage):
        base = datetime(2026, 1, 1, tzinfo=timezone.utc)
        for i in range(7):
            fake_db.seed(BLOGS, f"d{i}", {"title": f"D{i}", "website": "disruptivesolutionsinc",
                                           "createdAt": base + timedelta(days=i)})
        fake_db.seed(BLOGS, "legacy", {"title": "Legacy", "website": "unknown-site", "createdAt": base})
        fake_db.seed(BLOGS, "eco", {"title": "Eco", "website": "ecoshiftcorporation", "createdAt": base})

        service = BlogService(fake_db, fake_storage)
        first = service.list_blogs("disruptivesolutionsinc", page=1)
        eco = service.list_blogs("VAH", page=1)

        assert first.total_items == 8
        assert [b.id for b in first.items] == ["d6", "d5", "d4", "d3", "d2"]
        assert first.total_pages == 2
        assert eco.items == []
        assert eco.total_pages == 1

    def test_delete_logs_audit(self, fake_db, fake_storage, actor):
        fake_db.seed(BLOGS, "b1", {"title": "Old post"})

        BlogService(fake_db, fake_storage).delete_blog("b1", actor=actor)

        assert "b1" not in fake_db.docs(BLOGS)
        entry = audit_entries(fake_db)[0]
        assert entry["action"] == "delete"
        assert entry["entityName"] == "Old post"


class TestFaqService:

    def test_create_and_update_only_touches_content_fields(self, fake_db):
        service = FaqService(fake_db)
        faq_id = service.create_faq(FaqDraft(question="Warranty?", answer="2 years", icon="💡"))
        fake_db.docs(FAQ_SETTINGS)[faq_id]["order"] = 3

        service.update_faq(faq_id, FaqDraft(question="Warranty period?", answer="3 years", icon="not-an-icon"))

        faq = fake_db.docs(FAQ_SETTINGS)[faq_id]
        assert faq["question"] == "Warranty period?"
        assert faq["icon"] == "🚀"
        assert faq["order"] == 3

    def test_question_required(self, fake_db):
        with pytest.raises(ValidationFailedException, match="Question is required."):
            FaqService(fake_db).create_faq(FaqDraft(question=" ", answer="x"))

    def test_list_newest_first(self, fake_db):
        fake_db.seed(FAQ_SETTINGS, "old", {"question": "a", "createdAt": datetime(2025, 1, 1, tzinfo=timezone.utc)})
        fake_db.seed(FAQ_SETTINGS, "new", {"question": "b", "createdAt": datetime(2026, 1, 1, tzinfo=timezone.utc)})

        assert [f.id for f in FaqService(fake_db).list_faqs()] == ["new", "old"]


class TestPopupService:

    def test_preview_visibility(self):
        draft = PopupDraft(title="Sale", isActive=True, websites=["Ecoshift Corporation"], link="")

        preview = popup_service.preview(draft, image_preview_url="blob:local")

        assert preview["is_visible"] is True
        assert preview["image"] == "blob:local"
        assert preview["link"] == "/products"
        assert popup_service.preview(PopupDraft(title="Sale", isActive=True))["is_visible"] is False

    def test_save_requires_headline_and_website(self, fake_db, fake_storage):
        service = PopupService(fake_db, fake_storage)

        with pytest.raises(ValidationFailedException, match="Headline is required."):
            service.save_popup(PopupDraft(websites=["Ecoshift Corporation"]))
        with pytest.raises(ValidationFailedException, match="Select at least one website."):
            service.save_popup(PopupDraft(title="Sale"))

    def test_create_then_update_keeps_image(self, fake_db, fake_storage):
        service = PopupService(fake_db, fake_storage)
        popup_id = service.save_popup(
            PopupDraft(title="Sale", alignment=PopupAlignment.LEFT, websites=["Ecoshift Corporation"]),
            image_file=PNG,
        )
        stored = fake_db.docs(HOME_POPUPS)[popup_id]

        service.save_popup(
            PopupDraft(title="Big Sale", imageUrl=stored["imageUrl"], websites=["Ecoshift Corporation"]),
            editing_id=popup_id,
        )

        popup = fake_db.docs(HOME_POPUPS)[popup_id]
        assert popup["title"] == "Big Sale"
        assert popup["imageUrl"].endswith("/popups/cover.png")
        assert popup["alignment"] == "center"
        assert len(fake_storage.uploads) == 1


class TestProjectService:

    def test_background_image_required(self, fake_db, fake_storage):
        with pytest.raises(ValidationFailedException, match="Background image is required"):
            ProjectService(fake_db, fake_storage).save_project(ProjectDraft(title="Plant"))

    def test_create_uploads_background_and_logo(self, fake_db, fake_storage):
        project_id = ProjectService(fake_db, fake_storage).save_project(
            ProjectDraft(title="  Acme Plant ", category=ProjectCategory.COMMERCIAL),
            image_file=PNG,
            logo_file=UploadedFile(b"svg", "acme-logo.png", "image/png"),
            source="projects-bulk-upload",
        )

        project = fake_db.docs(PROJECTS)[project_id]
        assert project["title"] == "Acme Plant"
        assert project["category"] == "Commercial"
        assert project["logoUrl"].endswith("/projects/acme-logo.png")
        assert audit_entries(fake_db)[0]["context"]["source"] == "projects-bulk-upload"
