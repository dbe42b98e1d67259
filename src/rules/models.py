from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class AuthorRules(BaseModel):
    model_config = ConfigDict(extra="forbid")

    approved: list[str] = Field(
        default_factory=lambda: ["Tony Huffman", "Kayleigh Gilbert", "Sarah", "Charity"]
    )
    # contributor name -> public byline
    display_names: dict[str, str] = Field(
        default_factory=lambda: {
            "Tony Huffman": "Kif",
            "Kayleigh Gilbert": "Alicia Carrasco",
            "Sarah": "Daniel Catena",
            "Charity": "Julia Tell",
        }
    )


class LinkRules(BaseModel):
    model_config = ConfigDict(extra="forbid")

    local_domains: list[str] = Field(
        default_factory=lambda: ["geteducated.com", "www.geteducated.com"]
    )
    site_origin: str = "https://www.geteducated.com"
    blocked_suffix: str = ".edu"
    competitor_domains: list[str] = Field(
        default_factory=lambda: [
            "onlineu.com",
            "usnews.com",
            "affordablecollegesonline.com",
            "toponlinecollegesusa.com",
            "bestcolleges.com",
            "niche.com",
            "collegeconfidential.com",
            "cappex.com",
            "collegeraptor.com",
            "collegesimply.com",
            "graduateguide.com",
            "gradschools.com",
            "petersons.com",
            "princetonreview.com",
            "collegexpress.com",
        ]
    )
    allowed_external_domains: list[str] = Field(
        default_factory=lambda: [
            "bls.gov",
            "stats.bls.gov",
            "ed.gov",
            "nces.ed.gov",
            "studentaid.gov",
            "fafsa.gov",
            "collegescorecard.ed.gov",
            "chea.org",
            "aacsb.edu",
            "abet.org",
            "cacrep.org",
            "ccne-accreditation.org",
            "cswe.org",
            "ncate.org",
            "teac.org",
            "collegeboard.org",
            "acenet.edu",
            "aacn.nche.edu",
            "naspa.org",
            "apa.org",
            "nasw.org",
            "nursingworld.org",
        ]
    )
    min_internal_links: int = 3


class ShortcodeRules(BaseModel):
    model_config = ConfigDict(extra="forbid")

    # tag -> shortcode type value
    tags: dict[str, str] = Field(
        default_factory=lambda: {
            "ge_monetization": "monetization",
            "degree_table": "degree_table",
            "degree_offer": "degree_offer",
            "ge_internal_link": "internal_link",
            "ge_external_cited": "external_cited",
        }
    )
    extra_allowed_tags: list[str] = Field(default_factory=list)


class RiskBands(BaseModel):
    model_config = ConfigDict(extra="forbid")

    critical_score: int = 100
    high_score: int = 50
    medium_score: int = 20
    high_quality_below: int = 70
    medium_quality_below: int = 85


class RiskRules(BaseModel):
    model_config = ConfigDict(extra="forbid")

    weights: dict[str, int] = Field(
        default_factory=lambda: {
            "blocked_link": 100,
            "unauthorized_author": 100,
            "no_author": 100,
            "invalid_shortcode": 100,
            "unknown_shortcode": 100,
            "missing_shortcode": 80,
            "missing_internal_links": 25,
            "missing_external_links": 20,
            "word_count_low": 20,
            "poor_readability": 15,
            "weak_headings": 15,
            "missing_faqs": 10,
            "missing_bls_citation": 10,
            "word_count_high": 5,
            "external_link_warning": 5,
            "keyword_density_issue": 5,
        }
    )
    default_weight: int = 10
    major_weight: int = 20
    bands: RiskBands = Field(default_factory=RiskBands)


class ContentRules(BaseModel):
    model_config = ConfigDict(extra="forbid")

    min_word_count: int = 1500
    min_faqs: int = 3
    min_h2_headings: int = 3


class ValidationDefaults(BaseModel):
    model_config = ConfigDict(extra="forbid")

    min_quality_score: int = 70
    block_high_risk: bool = True
    enforce_approved_authors: bool = True
    check_links: bool = True
    check_shortcodes: bool = True
    require_monetization: bool = True
    block_unknown_shortcodes: bool = True


class PublishRules(BaseModel):
    model_config = ConfigDict(extra="forbid")

    default_environment: Literal["staging", "production"] = "staging"
    bulk_delay_seconds: float = 0.5
    http_timeout_seconds: float = 15.0
    excerpt_length: int = 160


class AutoPublishRules(BaseModel):
    model_config = ConfigDict(extra="forbid")

    enabled: bool = False
    days_until_auto_publish: int = 5
    max_risk_level: str = "LOW"
    min_quality_score: int = 80
    max_articles_per_run: int = 10


class EditorialRules(BaseModel):
    model_config = ConfigDict(extra="forbid")

    rules_version: str = "1"
    authors: AuthorRules = Field(default_factory=AuthorRules)
    links: LinkRules = Field(default_factory=LinkRules)
    shortcodes: ShortcodeRules = Field(default_factory=ShortcodeRules)
    risk: RiskRules = Field(default_factory=RiskRules)
    content: ContentRules = Field(default_factory=ContentRules)
    validation: ValidationDefaults = Field(default_factory=ValidationDefaults)
    publish: PublishRules = Field(default_factory=PublishRules)
    auto_publish: AutoPublishRules = Field(default_factory=AutoPublishRules)
