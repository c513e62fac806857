"""
Site configuration models for sitebridge
"""
from __future__ import annotations
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field


class ParamOptions(BaseModel):
    """Declaration of one per-domain extra parameter."""

    required: bool = Field(False, description="Fail loading when no record provides the parameter")


class DomainRecordConfig(BaseModel):
    """A backing record declared inline in the sites file."""

    domain: str = Field(..., description="Host name served by this record")
    enabled: bool = Field(True, description="Whether the domain is active")
    extra: Dict[str, Any] = Field(default_factory=dict, description="Extra data keyed by parameter name")


class SiteOptions(BaseModel):
    """Options for one configured site, keyed by slug in the sites file."""

    title: Optional[str] = Field(None, description="Display title, defaults to the slug")
    extra_params: Dict[str, ParamOptions] = Field(
        default_factory=dict,
        description="Extra parameters read from each backing record"
    )
    routes: List[str] = Field(
        default_factory=list,
        description="Route group identifiers in 'module:Class' form"
    )
    domains: List[DomainRecordConfig] = Field(
        default_factory=list,
        description="Inline backing records, read by ConfigSiteRepository only"
    )


class SitesConfig(BaseModel):
    """Top level of the sites YAML file."""

    sites: Dict[str, SiteOptions] = Field(default_factory=dict)

    class Config:
        json_schema_extra = {
            "example": {
                "sites": {
                    "foo": {
                        "title": "Foo",
                        "extra_params": {"color": {"required": False}},
                        "routes": ["myapp.routes:FooRoutes"],
                        "domains": [{"domain": "foo.example.com", "enabled": True}]
                    }
                }
            }
        }
