"""
Turns a queued news item into a published French blog article.

Flow: read AI settings and the source item, score its relevance for a
Belgian audience (once), ask OpenAI for the article as JSON, then store the
post and log token usage in Supabase.
"""

from __future__ import annotations

import json
import logging
import re
import time
import unicodedata
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

from openai import OpenAI
from supabase import Client

from masecurite.core.constants import (
    DEFAULT_FEATURED_IMAGE,
    OPENAI_COST_PER_1K_TOKENS,
    OPENAI_DEFAULT_COST_PER_1K_TOKENS,
)

logger = logging.getLogger(__name__)

DEFAULT_CATEGORY = "actualite"
DEFAULT_TAGS = ["cybersécurité", "belgique"]
SLUG_MAX_LENGTH = 80


class SourceItemNotFound(LookupError):
    pass


class ArticleGenerationError(RuntimeError):
    pass


@dataclass(frozen=True)
class GenerationOutcome:
    post_id: Any
    slug: str
    relevance_score: float | None
    tokens_used: int
    estimated_cost: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "success": True,
            "post_id": self.post_id,
            "slug": self.slug,
            "relevance_score": self.relevance_score,
            "tokens_used": self.tokens_used,
            "estimated_cost": self.estimated_cost,
        }


def get_openai_client(api_key: str) -> OpenAI:
    return OpenAI(api_key=api_key)


def slugify(title: str, now_ms: int | None = None) -> str:
    normalized = unicodedata.normalize("NFD", title.lower())
    ascii_only = "".join(c for c in normalized if not unicodedata.combining(c))
    base = re.sub(r"[^a-z0-9]+", "-", ascii_only).strip("-")[:SLUG_MAX_LENGTH] or "article"
    stamp = now_ms if now_ms is not None else int(time.time() * 1000)
    return f"{base}-{stamp}"


def estimate_cost(model: str, total_tokens: int) -> float:
    per_1k = OPENAI_COST_PER_1K_TOKENS.get(model, OPENAI_DEFAULT_COST_PER_1K_TOKENS)
    return (total_tokens / 1000) * per_1k


def _chat_json(client: OpenAI, model: str, system: str, prompt: str, temperature: float):
    response = client.chat.completions.create(
        model=model,
        messages=[
            {"role": "system", "content": system},
            {"role": "user", "content": prompt},
        ],
        response_format={"type": "json_object"},
        temperature=temperature,
    )
    try:
        content = json.loads(response.choices[0].message.content)
    except (TypeError, ValueError) as exc:
        raise ArticleGenerationError("OpenAI returned invalid JSON") from exc
    if not isinstance(content, dict):
        raise ArticleGenerationError("OpenAI returned invalid JSON")
    return content, response.usage


def calculate_relevance(client: OpenAI, model: str, item: dict) -> dict:
    source_name = (item.get("content_sources") or {}).get("name") or "Unknown"
    summary = item.get("summary") or (item.get("original_content") or "")[:500]

    prompt = f"""Analyze this cybersecurity news item for relevance to Belgian consumers.

Title: {item.get("title")}
Summary: {summary}
Source: {source_name}

Score from 0 to 1 based on:
- Direct mention of Belgium, Belgian companies, or Belgian institutions (0.3)
- Affects services used in Belgium: itsme, bpost, Belgian banks, Proximus, etc. (0.3)
- General cybersecurity threat relevant to consumers (0.2)
- Educational value for non-technical audience (0.2)

Respond with JSON only:
{{
  "score": 0.85,
  "reason": "Brief explanation in French",
  "suggested_angle": "Focus angle for Belgian audience",
  "category": "alerte|guide|actualite|arnaque"
}}"""

    relevance, _ = _chat_json(
        client,
        model,
        "You are a cybersecurity analyst for Belgian consumers. Always respond with valid JSON.",
        prompt,
        temperature=0.3,
    )
    return relevance


def generate_article(client: OpenAI, model: str, item: dict, relevance: dict):
    prompt = f"""You are a Belgian cybersecurity journalist writing for MaSécurité.be.
Your audience is French-speaking Belgian consumers (not technical experts).
Write the ENTIRE article in Belgian French. Never output English text.

SOURCE MATERIAL:
Title: {item.get("title")}
Content: {item.get("original_content") or item.get("summary") or ""}
Original URL: {item.get("original_url")}

RELEVANCE ANALYSIS:
Score: {relevance.get("score")}
Suggested Angle: {relevance.get("suggested_angle")}

WRITING GUIDELINES:
1. Use "GSM" not "portable"; reference Safeonweb.be, CCB, CERT.be, Police Fédérale
2. COMPLETELY REWRITE - do not copy any sentences from the source
3. Banks: Belfius, KBC, ING, BNP Paribas Fortis. Telecom: Proximus, Orange, Telenet
4. Length: 600-900 words
5. Include a "Ce que vous devez faire" section with 3-5 bullet points
6. Tone: professional but accessible, slightly urgent for alerts

SEO REQUIREMENTS:
- Meta title max 60 chars, meta description max 155 chars
- 5 tags and 3 SEO keywords, in French

OUTPUT FORMAT (JSON):
{{
  "title": "...",
  "meta_title": "...",
  "meta_description": "...",
  "excerpt": "...(max 200 chars)...",
  "content": "...(HTML with <p>, <h2>, <ul>, <strong>)...",
  "category": "{relevance.get("category") or DEFAULT_CATEGORY}",
  "tags": ["..."],
  "seo_keywords": ["..."],
  "reading_time_minutes": 4
}}"""

    return _chat_json(
        client,
        model,
        "You are a professional Belgian cybersecurity journalist writing in French. "
        "Always respond with valid JSON. Write ALL content in French (Belgian French), never in English.",
        prompt,
        temperature=0.7,
    )


def build_post(article: dict, item: dict, relevance: dict, author_id: Any, slug: str) -> dict:
    title = article.get("title") or item.get("title") or "Article sans titre"
    return {
        "slug": slug,
        "title": title,
        "meta_title": article.get("meta_title") or title[:60],
        "meta_description": article.get("meta_description") or article.get("excerpt") or title[:155],
        "excerpt": article.get("excerpt") or title[:200],
        "content": article.get("content") or "<p>Contenu en cours de génération...</p>",
        "featured_image": DEFAULT_FEATURED_IMAGE,
        "category": article.get("category") or relevance.get("category") or DEFAULT_CATEGORY,
        "tags": article.get("tags") or DEFAULT_TAGS,
        "reading_time": article.get("reading_time_minutes") or 4,
        "author_id": author_id,
        "status": "published",
        "published_at": datetime.now(timezone.utc).isoformat(),
    }


def _first(response) -> dict | None:
    rows = response.data or []
    return rows[0] if rows else None


def _set_item_status(supabase: Client, item_id: Any, **values) -> None:
    supabase.table("source_items").update(values).eq("id", item_id).execute()


def _log_generation(supabase: Client, **values) -> None:
    supabase.table("ai_generation_logs").insert({"success": True, **values}).execute()


def mark_item_failed(supabase: Client, item_id: Any) -> None:
    try:
        _set_item_status(supabase, item_id, status="failed")
    except Exception:
        logger.exception("article_status_update_failed item_id=%s", item_id)


def generate_post_for_item(
    supabase: Client,
    client: OpenAI,
    item_id: Any,
    default_model: str,
) -> GenerationOutcome:
    ai_settings = _first(supabase.table("ai_settings").select("*").limit(1).execute()) or {}
    model = ai_settings.get("openai_model") or default_model

    item = _first(
        supabase.table("source_items")
        .select("*, content_sources(name)")
        .eq("id", item_id)
        .limit(1)
        .execute()
    )
    if not item:
        raise SourceItemNotFound(item_id)

    _set_item_status(supabase, item_id, status="processing")

    relevance = {
        "score": item.get("relevance_score"),
        "reason": item.get("relevance_reason"),
        "suggested_angle": item.get("suggested_angle"),
        "category": item.get("suggested_category"),
    }

    if not item.get("relevance_score"):
        started = time.monotonic()
        relevance = calculate_relevance(client, model, item)
        _log_generation(
            supabase,
            source_item_id=item_id,
            operation_type="relevance_check",
            model_used=model,
            processing_time_ms=int((time.monotonic() - started) * 1000),
        )
        _set_item_status(
            supabase,
            item_id,
            relevance_score=relevance.get("score"),
            relevance_reason=relevance.get("reason"),
            suggested_angle=relevance.get("suggested_angle"),
            suggested_category=relevance.get("category"),
        )

    started = time.monotonic()
    article, usage = generate_article(client, model, item, relevance)
    processing_ms = int((time.monotonic() - started) * 1000)

    author_id = ai_settings.get("default_author_id")
    if not author_id:
        author = _first(supabase.table("blog_authors").select("id").limit(1).execute())
        author_id = author.get("id") if author else None

    title = article.get("title") or item.get("title") or "Article sans titre"
    post = build_post(article, item, relevance, author_id, slugify(title))

    new_post = _first(supabase.table("blog_posts").insert(post).execute())
    if not new_post:
        raise ArticleGenerationError("Blog post insert returned no row")

    total_tokens = getattr(usage, "total_tokens", 0) or 0
    cost = estimate_cost(model, total_tokens)

    _log_generation(
        supabase,
        source_item_id=item_id,
        blog_post_id=new_post["id"],
        operation_type="article_generation",
        model_used=model,
        prompt_tokens=getattr(usage, "prompt_tokens", 0) or 0,
        completion_tokens=getattr(usage, "completion_tokens", 0) or 0,
        total_tokens=total_tokens,
        estimated_cost_usd=cost,
        processing_time_ms=processing_ms,
    )

    _set_item_status(supabase, item_id, status="published", generated_post_id=new_post["id"])

    logger.info(
        "article_generated item_id=%s post_id=%s model=%s tokens=%s",
        item_id,
        new_post["id"],
        model,
        total_tokens,
    )

    return GenerationOutcome(
        post_id=new_post["id"],
        slug=new_post.get("slug", post["slug"]),
        relevance_score=relevance.get("score"),
        tokens_used=total_tokens,
        estimated_cost=cost,
    )
