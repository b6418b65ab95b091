from __future__ import annotations

import json
import logging
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

from learnrank.catalog import CatalogDomain, CatalogEntry, variant_from_dict

logger = logging.getLogger(__name__)

# <section>.json -> variant used for its records
SECTION_DOMAINS: Dict[str, CatalogDomain] = {
    "tech_categories": CatalogDomain.CATEGORY,
    "non_tech_categories": CatalogDomain.CATEGORY,
    "exams": CatalogDomain.EXAM,
    "certifications": CatalogDomain.CERTIFICATION,
    "learning_paths": CatalogDomain.LEARNING_PATH,
    "degrees": CatalogDomain.DEGREE,
    "trending_resources": CatalogDomain.RESOURCE,
    "search_results": CatalogDomain.RESOURCE,
}

# Search results are ranked by the search scorer, never as an explore section.
SEARCH_SECTION = "search_results"


@dataclass(frozen=True)
class LoadedJson:
    data: Any
    source: str  # "file" | "none"
    path: Optional[str] = None


def load_json_file(path: Optional[str]) -> LoadedJson:
    """
    Best-effort: a missing path, unreadable file or invalid JSON returns
    source='none' and data=None (caller falls back to an empty input).
    """
    if not path:
        return LoadedJson(data=None, source="none", path=None)
    p = Path(path)
    try:
        return LoadedJson(data=json.loads(p.read_text(encoding="utf-8")), source="file", path=str(p))
    except (OSError, ValueError) as exc:
        logger.warning("Could not load %s: %s", p, type(exc).__name__)
        return LoadedJson(data=None, source="none", path=str(p))


def records_to_entries(domain: CatalogDomain, records: Any) -> List[CatalogEntry]:
    """Build variants from a JSON list; non-mapping records are skipped."""
    if not isinstance(records, list):
        return []
    out: List[CatalogEntry] = []
    for idx, rec in enumerate(records):
        if not isinstance(rec, Mapping):
            logger.debug("Skipping %s record #%d: not an object", domain.value, idx)
            continue
        out.append(variant_from_dict(domain, rec))
    return out


def load_catalog_dir(path: Optional[str]) -> Dict[str, List[CatalogEntry]]:
    """
    Read every known <section>.json under `path` except search results.
    Sections whose file is absent are omitted; unreadable files yield an empty section.
    """
    if not path:
        return {}
    base = Path(path)
    if not base.is_dir():
        logger.warning("Catalog directory not found: %s", base)
        return {}

    catalogs: Dict[str, List[CatalogEntry]] = {}
    for section, domain in SECTION_DOMAINS.items():
        if section == SEARCH_SECTION:
            continue
        file_path = base / f"{section}.json"
        if not file_path.exists():
            continue
        loaded = load_json_file(str(file_path))
        entries = records_to_entries(domain, loaded.data)
        if section.startswith("non_tech"):
            entries = [_as_non_tech(e) for e in entries]
        catalogs[section] = entries
    return catalogs


def _as_non_tech(entry: CatalogEntry) -> CatalogEntry:
    return replace(entry, is_tech=False) if getattr(entry, "is_tech", None) is True else entry
