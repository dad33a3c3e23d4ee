"""
Product Form Service
Add/edit product forms for the website catalog, Shopify and Taskflow

The three forms share one flow and differ only by their FormProfile
(category collection, fixed websites, name field, how classifications are
stored).

Publish steps:
1. Validate the name
2. Reject duplicates (same name on an overlapping website)
3. Create pending brand/category/application tags, resolve temp- ids
4. Upload new images
5. Build technical specs and custom-section specs
6. Create or update the product, then audit

Author: TM3
Date: 2026-02-10
"""
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict, List, Optional, Tuple

from app.core.database import (
    APPLICATIONS, BRANDS, CATEGORIES, PRODUCT_FAMILIES, PRODUCTS, SPECS, SERVER_TIMESTAMP,
)
from app.core.exceptions import (
    DocumentNotFoundException, DuplicateDocumentException, ValidationFailedException,
)
from app.domain.audit import AuditAction
from app.domain.catalog import ProductClass, WEBSITE_PRODUCT_DOMAINS, Website
from app.domain.product import ProductFormDraft
from app.repositories.base_repository import FirestoreRepository
from app.repositories.master_data_repository import MasterDataRepository
from app.repositories.product_repository import ProductRepository
from app.services.audit_service import AuditService
from app.services.bulk_upload_service import to_number
from app.services.storage_service import CloudinaryStorage, UploadedFile

logger = logging.getLogger(__name__)

TEMP_PREFIX = "temp-"
DEFAULT_ROBOTS = "index, follow"


@dataclass(frozen=True)
class FormProfile:
    """What differs between the product forms"""
    key: str
    category_collection: str
    category_field: str
    fixed_websites: Tuple[str, ...]
    name_field: str
    name_required_message: str
    duplicate_message: str
    page: str
    source: str
    grouped_specs: bool = True
    store_names: bool = True


PROFILES: Dict[str, FormProfile] = {
    "website": FormProfile(
        key="website",
        category_collection=PRODUCT_FAMILIES,
        category_field="title",
        fixed_websites=(),
        name_field="itemDescription",
        name_required_message="Please enter an item description!",
        duplicate_message="This item description already exists on a selected website.",
        page="/products/all-products",
        source="add-new-product-form",
    ),
    "shopify": FormProfile(
        key="shopify",
        category_collection=PRODUCT_FAMILIES,
        category_field="title",
        fixed_websites=(Website.SHOPIFY.value,),
        name_field="itemDescription",
        name_required_message="Please enter an item description!",
        duplicate_message="This product name already exists on Shopify.",
        page="/products/shopify-products",
        source="shopify-add-new-product-form",
    ),
    "taskflow": FormProfile(
        key="taskflow",
        category_collection=CATEGORIES,
        category_field="name",
        fixed_websites=(Website.TASKFLOW.value,),
        name_field="name",
        name_required_message="Please enter a product name!",
        duplicate_message="This product name already exists on Taskflow.",
        page="/taskflow-products",
        source="taskflow-add-new-product-form",
        grouped_specs=False,
        store_names=False,
    ),
}


def get_profile(key: str) -> FormProfile:
    profile = PROFILES.get(key)
    if profile is None:
        raise DocumentNotFoundException("product_forms", key)
    return profile


def form_websites(profile: FormProfile, draft: ProductFormDraft) -> List[str]:
    return list(profile.fixed_websites) or list(draft.websites)


@dataclass
class ProductFormFiles:
    """New images picked in the form (existing URLs live on the draft)"""
    main: Optional[UploadedFile] = None
    raw: Optional[UploadedFile] = None
    qr: Optional[UploadedFile] = None
    dimension_drawing: Optional[UploadedFile] = None
    mounting_height: Optional[UploadedFile] = None
    gallery: List[UploadedFile] = field(default_factory=list)


def seo_preview(draft: ProductFormDraft) -> dict:
    """
    Search-result preview for the SEO panel

    The canonical URL comes from the first selected website with a known
    storefront; an explicit canonical is kept otherwise.
    """
    seo = draft.seo or {}
    slug = seo.get("slug") or ""
    canonical = seo.get("canonical") or ""
    domain = None
    for website in draft.websites:
        if website in WEBSITE_PRODUCT_DOMAINS:
            domain = WEBSITE_PRODUCT_DOMAINS[website]
            break
    if slug and domain:
        canonical = f"{domain}/{slug}"

    return {
        "title": seo.get("title") or draft.name,
        "description": seo.get("description") or draft.name,
        "slug": slug,
        "canonical": canonical,
        "breadcrumb": f"{domain or ''} › {slug or '...'}",
        "robots": seo.get("robots") or DEFAULT_ROBOTS,
        "ogImage": seo.get("ogImage") or draft.mainImage,
    }


def build_dynamic_specs(custom_sections: List[dict]) -> List[dict]:
    """[{title, selected: [a, b]}] -> [{title, value: a}, {title, value: b}]"""
    specs = []
    for section in custom_sections or []:
        for value in section.get("selected") or []:
            specs.append({"title": section.get("title", ""), "value": value})
    return specs


class ProductFormService:

    def __init__(self, db, storage: CloudinaryStorage):
        self.db = db
        self.products = ProductRepository(db)
        self.brands = MasterDataRepository(db, BRANDS, "title")
        self.applications = MasterDataRepository(db, APPLICATIONS, "title")
        self.specs = FirestoreRepository(db, SPECS)
        self.storage = storage
        self.audit = AuditService(db)

    def _categories(self, profile: FormProfile) -> MasterDataRepository:
        return MasterDataRepository(self.db, profile.category_collection, profile.category_field)

    # ------------------------------------------------------------------
    # Form options
    # ------------------------------------------------------------------

    def _options(self, repo: MasterDataRepository, websites: List[str]) -> List[dict]:
        options = []
        items = repo.find_for_websites(websites) if websites else repo.find_all()
        for item in items:
            item_websites = item.to_dict().get("websites") or []
            options.append({"id": item.id, "name": repo.display_value(item), "websites": item_websites})
        return sorted(options, key=lambda o: o["name"].lower())

    def classification_options(self, profile: FormProfile, websites: Optional[List[str]] = None) -> dict:
        """
        Categories, brands and applications for the pickers

        Fixed-website profiles only list items used on their website; the
        website form can narrow the lists to the selected websites.
        """
        scope = list(profile.fixed_websites) or list(websites or [])
        return {
            "categories": self._options(self._categories(profile), scope),
            "brands": self._options(self.brands, scope),
            "applications": self._options(self.applications, scope),
            "productClasses": [c.value for c in ProductClass],
        }

    def spec_fields(self, profile: FormProfile, category_ids: List[str]) -> List[dict]:
        """
        Spec inputs for the selected categories

        Each category lists spec group ids in `specifications`; every labelled
        item of those groups becomes one field.
        """
        categories = self._categories(profile)
        group_ids: List[str] = []
        for category_id in category_ids:
            category = categories.find_by_id(category_id)
            if category is None:
                continue
            for group_id in category.to_dict().get("specifications") or []:
                if group_id not in group_ids:
                    group_ids.append(group_id)

        fields = []
        for group_id in group_ids:
            group = self.specs.find_by_id(group_id)
            if group is None:
                continue
            data = group.to_dict()
            group_name = data.get("name") or "Unnamed Group"
            for item in data.get("items") or []:
                label = item.get("label") if isinstance(item, dict) else None
                if label:
                    fields.append({
                        "id": f"{group_id}-{label}",
                        "label": label,
                        "specGroup": group_name,
                        "specGroupId": group_id,
                    })
        return fields

    # ------------------------------------------------------------------
    # Publish
    # ------------------------------------------------------------------

    def _check_duplicate(self, profile: FormProfile, name: str, websites: List[str], editing_id: Optional[str]) -> None:
        for product in self.products.find_by_field(profile.name_field, name):
            if product.id == editing_id:
                continue
            if any(w in websites for w in product.website_list):
                raise DuplicateDocumentException(profile.duplicate_message, existing_id=product.id)

    def _create_pending_tags(self, profile: FormProfile, draft: ProductFormDraft, websites: List[str]) -> Dict[str, str]:
        """Create new tags and map their temp- ids to real ids"""
        id_map: Dict[str, str] = {}
        application_extra = {"isActive": True, "imageUrl": "", "description": ""}
        pending = [
            (self._categories(profile), draft.pendingCategories, dict(application_extra, specifications=[])),
            (self.brands, draft.pendingBrands, {}),
            (self.applications, draft.pendingApplications, application_extra),
        ]
        for repo, names, extra in pending:
            for name in names:
                clean = (name or "").strip()
                if not clean:
                    continue
                existing = repo.find_by_value(clean)
                if existing is not None:
                    id_map[f"{TEMP_PREFIX}{clean}"] = existing.id
                    continue
                id_map[f"{TEMP_PREFIX}{clean}"] = repo.create(dict(
                    {repo.field: clean, "websites": websites,
                     "createdAt": SERVER_TIMESTAMP, "updatedAt": SERVER_TIMESTAMP},
                    **extra
                ))
        if id_map:
            logger.info(f"Created pending tags: {', '.join(id_map)}")
        return id_map

    def _upload(self, file: Optional[UploadedFile], existing: str) -> str:
        return self.storage.upload(file, folder="products") if file else (existing or "")

    def _technical_specs(self, profile: FormProfile, draft: ProductFormDraft, category_id: str) -> List[dict]:
        values = {k: v for k, v in draft.specValues.items() if v and v.strip()}
        if not values:
            return []
        fields = {f["id"]: f for f in self.spec_fields(profile, [category_id])} if category_id else {}

        if not profile.grouped_specs:
            return [
                {"name": fields[key]["label"] if key in fields else key, "value": value}
                for key, value in values.items()
            ]

        grouped: Dict[str, List[dict]] = {}
        by_group_name = {f"{f['specGroup']}-{f['label']}": f for f in fields.values()}
        for key, value in values.items():
            spec = fields.get(key) or by_group_name.get(key)
            if spec is None:
                continue
            grouped.setdefault(spec["specGroup"], []).append({"name": spec["label"], "value": value})
        return [{"specGroup": group, "specs": specs} for group, specs in grouped.items()]

    def _classification(self, profile: FormProfile, draft: ProductFormDraft, id_map: Dict[str, str]) -> dict:
        def resolve(item_id: str) -> str:
            return id_map.get(item_id, item_id)

        category_id = resolve(draft.categoryId) if draft.categoryId else ""
        brand_id = resolve(draft.brandIds[0]) if draft.brandIds else ""
        applications = [resolve(a) for a in draft.applicationIds]

        if not profile.store_names:
            return {"category": category_id, "brand": brand_id, "applications": applications}

        family = self._categories(profile).find_by_id(category_id) if category_id else None
        brand = self.brands.find_by_id(brand_id) if brand_id else None
        return {
            "productFamily": self._categories(profile).display_value(family) if family else "",
            "brand": self.brands.display_value(brand) if brand else "",
            "applications": applications,
        }

    def publish(
        self,
        profile: FormProfile,
        draft: ProductFormDraft,
        files: Optional[ProductFormFiles] = None,
        editing_id: Optional[str] = None,
        actor: Optional[dict] = None,
    ) -> str:
        """
        Save the form as a product document

        Raises:
            ValidationFailedException: Name missing
            DuplicateDocumentException: Name already used on a selected website
            StorageUploadException: Image upload failed
        """
        name = draft.name.strip()
        if not name:
            raise ValidationFailedException(profile.name_required_message, field="name")

        websites = form_websites(profile, draft)
        self._check_duplicate(profile, name, websites, editing_id)

        id_map = self._create_pending_tags(profile, draft, websites)
        classification = self._classification(profile, draft, id_map)
        category_id = id_map.get(draft.categoryId, draft.categoryId)

        files = files or ProductFormFiles()
        main_url = self._upload(files.main, draft.mainImage)
        gallery = list(draft.galleryImages) + [self.storage.upload(f, folder="products") for f in files.gallery]

        payload = {
            profile.name_field: name,
            "productClass": draft.productClass,
            "shortDescription": draft.shortDescription,
            "itemCode": draft.itemCode,
            "ecoItemCode": draft.ecoItemCode,
            "litItemCode": draft.litItemCode,
            "regularPrice": to_number(draft.regularPrice),
            "salePrice": to_number(draft.salePrice),
            "technicalSpecs": self._technical_specs(profile, draft, category_id),
            "dynamicSpecs": build_dynamic_specs(draft.customSections),
            "mainImage": main_url,
            "rawImage": self._upload(files.raw, draft.rawImage),
            "qrCodeImage": self._upload(files.qr, draft.qrCodeImage),
            "dimensionDrawingImage": self._upload(files.dimension_drawing, draft.dimensionDrawingImage),
            "mountingHeightImage": self._upload(files.mounting_height, draft.mountingHeightImage),
            "galleryImages": gallery,
            "website": websites,
            "websites": websites,
            "status": draft.status,
            "updatedAt": SERVER_TIMESTAMP,
        }
        payload.update(classification)

        if profile.key != "taskflow":
            preview = seo_preview(draft)
            payload["slug"] = preview["slug"]
            payload["seo"] = {
                "itemDescription": draft.seo.get("description") or name,
                "description": draft.seo.get("description") or "",
                "canonical": preview["canonical"],
                "ogImage": draft.seo.get("ogImage") or main_url,
                "robots": preview["robots"],
                "lastUpdated": datetime.now(timezone.utc).isoformat(),
            }

        context = {"page": profile.page, "source": profile.source, "collection": PRODUCTS}
        if editing_id:
            self.products.update(editing_id, payload)
            self.audit.log_event(AuditAction.UPDATE, "product", editing_id, name, context=context, actor=actor)
            return editing_id

        payload["createdAt"] = SERVER_TIMESTAMP
        product_id = self.products.create(payload)
        self.audit.log_event(AuditAction.CREATE, "product", product_id, name, context=context, actor=actor)
        return product_id

