"""Reshape Jikan v4 payloads into SlimeList catalog records."""

from typing import Dict, Any, List
from ..models.types import CatalogEntry, EntryStub, AiredRange


def _names(items) -> List[str]:
    return [it.get("name") for it in (items or []) if it.get("name")]


def norm_aired(a: Dict[str, Any]) -> AiredRange:
    a = a or {}
    return {"start": a.get("from"), "end": a.get("to"), "label": a.get("string")}


def norm_entry_from_jikan(d: Dict[str, Any]) -> CatalogEntry:
    score = d.get("score")
    return {
        "id": d.get("mal_id"),
        "title": d.get("title") or "",
        "titleEnglish": d.get("title_english"),
        "titleJapanese": d.get("title_japanese"),
        "episodeCount": d.get("episodes") or 0,
        "score": float(score) if isinstance(score, (int, float)) else 0.0,
        "images": d.get("images") or {},
        "genres": _names(d.get("genres")),
        "studios": _names(d.get("studios")),
        "airedRange": norm_aired(d.get("aired")),
        "synopsis": d.get("synopsis") or "",
        "type": (d.get("type") or "").upper() or None,
        "status": d.get("status"),
        "year": d.get("year"),
        "url": d.get("url"),
    }


def norm_stub_from_jikan(d: Dict[str, Any]) -> EntryStub:
    return {"id": d.get("mal_id"), "title": d.get("title") or "", "images": d.get("images") or {}}


def norm_recommendations(items: List[Dict[str, Any]]) -> List[EntryStub]:
    """Recommendation items wrap the related title under `entry`."""
    out: List[EntryStub] = []
    for it in items or []:
        entry = it.get("entry") or {}
        if entry:
            out.append(norm_stub_from_jikan(entry))
    return out


def cover_url(entry: CatalogEntry) -> str:
    """Pick the image snapshot stored on a list entry."""
    jpg = (entry.get("images") or {}).get("jpg") or {}
    return jpg.get("large_image_url") or jpg.get("image_url") or ""
