"""
Master Data Domain Models

Maintenance forms for the classification collections the product forms
pick from: brands, applications, product families, spec groups and the
standalone spec label pool.

Author: TM3
Date: 2026-02-10
"""
from typing import List

from pydantic import BaseModel, Field

from app.domain.catalog import Website


class BrandDraft(BaseModel):
    title: str = ""
    description: str = ""
    category: str = Field("", description="brand_categories name")
    href: str = ""
    websites: List[Website] = Field(default_factory=list)
    image: str = Field("", description="Existing logo URL, replaced by an uploaded file")


class ApplicationDraft(BaseModel):
    title: str = ""
    description: str = ""
    websites: List[Website] = Field(default_factory=list)
    imageUrl: str = ""


class ProductFamilyDraft(BaseModel):
    title: str = ""
    description: str = ""
    websites: List[Website] = Field(default_factory=list)
    specifications: List[str] = Field(default_factory=list, description="Spec group ids")
    imageUrl: str = ""


class SpecLabel(BaseModel):
    label: str = ""


class SpecGroupDraft(BaseModel):
    """A named group of spec labels; each label becomes one product form field"""
    name: str = ""
    items: List[SpecLabel] = Field(default_factory=list)
