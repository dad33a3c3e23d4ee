"""
CMS Option Catalog
Single Source of Truth for the fixed option lists shared by the admin pages

Websites, blog/project categories, FAQ icons and product classes are stored
in Firestore as plain strings; these enums hold the canonical values.

Author: TM3
Date: 2026-02-10
"""
from enum import Enum
from typing import Dict, List, Optional


class Website(str, Enum):
    """Affiliated websites (value stored in product/popup/project documents)"""
    DISRUPTIVE = "Disruptive Solutions Inc"
    ECOSHIFT = "Ecoshift Corporation"
    VAH = "Value Acquisitions Holdings"
    TASKFLOW = "Taskflow"
    SHOPIFY = "Shopify"


# Sites whose products appear in the All Products table
MANAGED_PRODUCT_WEBSITES: List[str] = [
    Website.DISRUPTIVE.value,
    Website.ECOSHIFT.value,
    Website.VAH.value,
    Website.TASKFLOW.value,
]

class ContentWebsite(str, Enum):
    """Sites a popup or project can target"""
    ECOSHIFT = Website.ECOSHIFT.value
    DISRUPTIVE = Website.DISRUPTIVE.value
    VAH = Website.VAH.value


CONTENT_WEBSITES: List[str] = [w.value for w in ContentWebsite]

# Storefront product pages used for SEO canonical URLs
WEBSITE_PRODUCT_DOMAINS: Dict[str, str] = {
    Website.ECOSHIFT.value: "https://ecoshift-website.vercel.app/products",
    Website.DISRUPTIVE.value: "https://disruptive-solutions-inc.vercel.app/products",
    Website.VAH.value: "https://vah.com.ph/solutions",
}


class BlogWebsite(str, Enum):
    """Blog documents use their own website slugs"""
    DISRUPTIVE = "disruptivesolutionsinc"
    ECOSHIFT = "ecoshiftcorporation"
    VAH = "VAH"

    @classmethod
    def resolve(cls, value: Optional[str]) -> "BlogWebsite":
        """Unknown or missing stored values fall back to Disruptive"""
        for member in cls:
            if member.value == value:
                return member
        return cls.DISRUPTIVE


class BlogCategory(str, Enum):
    INDUSTRY_NEWS = "Industry News"
    ENGINEERING = "Engineering"
    TECH_UPDATES = "Tech Updates"
    CASE_STUDY = "Case Study"


class BlogStatus(str, Enum):
    PUBLISHED = "Published"
    DRAFT = "Draft"


class ProjectCategory(str, Enum):
    INDUSTRIAL = "Industrial"
    COMMERCIAL = "Commercial"
    ARCHITECTURE = "Architecture"
    TECHNOLOGY = "Technology"

    @classmethod
    def match(cls, value: str) -> Optional["ProjectCategory"]:
        """Case-insensitive lookup, None when unknown"""
        needle = (value or "").strip().lower()
        for member in cls:
            if member.value.lower() == needle:
                return member
        return None


class PopupAlignment(str, Enum):
    LEFT = "left"
    CENTER = "center"
    RIGHT = "right"


class ProductClass(str, Enum):
    SPF = "spf"
    STANDARD = "standard"


FAQ_ICONS: List[str] = ["🚀", "📩", "🛠️", "💡", "❓"]
DEFAULT_FAQ_ICON = FAQ_ICONS[0]
