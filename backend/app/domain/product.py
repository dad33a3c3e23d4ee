"""
Product Domain Model

Represents a product document of the shared Firestore catalog.
Product documents are written by several forms and importers, so only the
fields the CMS reads are declared; everything else is kept as extra data.

Author: TM3
Date: 2025-10-17
Updated: 2026-02-10 (Firestore document model)
"""
from datetime import datetime
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, Field

from app.domain.document import CMSDocument


class SpecItem(BaseModel):
    """One technical spec value"""
    name: str
    value: str


class SpecGroup(BaseModel):
    """Technical specs grouped under a spec group title"""
    specGroup: str
    specs: List[SpecItem] = Field(default_factory=list)


class Product(CMSDocument):
    """
    Product document

    Fields:
        itemDescription: Display name used by website/shopify forms
        name: Display name used by Taskflow and the bulk uploader
        itemCode / ecoItemCode / litItemCode: Item codes per brand line
        productClass: spf, standard or empty
        website / websites: Sites the product is published on (both kept in sync)
        categories / category / productFamily: Classification (shape varies by writer)
    """

    itemDescription: Optional[str] = None
    name: Optional[str] = None
    itemCode: Optional[str] = None
    ecoItemCode: Optional[str] = None
    litItemCode: Optional[str] = None
    productClass: Optional[str] = None
    mainImage: Optional[str] = None
    rawImage: Optional[str] = None
    categories: Optional[Union[str, List[str]]] = None
    category: Optional[Union[str, List[str]]] = None
    productFamily: Optional[str] = None
    brand: Optional[str] = None
    website: Optional[Union[str, List[str]]] = None
    websites: Optional[List[str]] = None
    technicalSpecs: Optional[List[Any]] = None
    createdAt: Optional[datetime] = None
    updatedAt: Optional[datetime] = None

    @property
    def display_name(self) -> str:
        """Name shown in tables and confirmation dialogs"""
        return self.itemDescription or self.name or ""

    @property
    def website_list(self) -> List[str]:
        """`website` may be stored as a string or a list"""
        if isinstance(self.website, list):
            return self.website
        if self.website:
            return [self.website]
        return []


class ProductFormDraft(BaseModel):
    """
    Values of the add-new-product form

    Classification fields hold document ids; ids starting with "temp-" refer
    to pending tags that are created on publish.
    """
    name: str = ""
    shortDescription: str = ""
    productClass: str = ""
    ecoItemCode: str = ""
    litItemCode: str = ""
    itemCode: str = ""
    regularPrice: Union[float, str, None] = 0
    salePrice: Union[float, str, None] = 0
    status: str = "draft"
    websites: List[str] = Field(default_factory=list)
    categoryId: str = ""
    brandIds: List[str] = Field(default_factory=list)
    applicationIds: List[str] = Field(default_factory=list)
    pendingCategories: List[str] = Field(default_factory=list)
    pendingBrands: List[str] = Field(default_factory=list)
    pendingApplications: List[str] = Field(default_factory=list)
    specValues: Dict[str, str] = Field(default_factory=dict)
    customSections: List[Dict[str, Any]] = Field(default_factory=list)
    seo: Dict[str, str] = Field(default_factory=dict)

    # Existing image URLs (edit mode)
    mainImage: str = ""
    rawImage: str = ""
    qrCodeImage: str = ""
    dimensionDrawingImage: str = ""
    mountingHeightImage: str = ""
    galleryImages: List[str] = Field(default_factory=list)
