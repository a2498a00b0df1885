"""Load declarative assessment and quest content from bundled JSON resources."""

from __future__ import annotations

import json
from importlib import resources
from pathlib import Path
from typing import Any

from .models import DOMAIN_IDS, DIFFICULTIES, QUEST_TYPES, Domain, Question, QuestTemplate

CONTENT_PACKAGE = "hunterevo.content"
QUESTIONS_FILE = "questions.json"
TEMPLATES_FILE = "daily_templates.json"
SEED_FILE = "seed.json"
QUESTIONS_PER_DOMAIN = 5


def _question_from_dict(domain_id: str, raw: dict[str, Any]) -> Question:
    """Build a question from raw JSON content."""
    text = str(raw.get("question", "")).strip()
    if not text:
        raise ValueError(f"Question '{raw.get('id', '<unknown>')}' has no text.")
    return Question(
        id=int(raw["id"]),
        domain=domain_id,
        question=text,
        description=str(raw.get("description", "")),
    )


def _domain_from_dict(raw: dict[str, Any]) -> Domain:
    """Build a domain from raw JSON content."""
    domain_id = str(raw["id"])
    if domain_id not in DOMAIN_IDS:
        raise ValueError(f"Unknown domain id: {domain_id}")
    questions = [_question_from_dict(domain_id, item) for item in raw.get("questions", [])]
    return Domain(id=domain_id, name=str(raw.get("name", domain_id.title())), questions=questions)


def _template_from_dict(raw: dict[str, Any]) -> QuestTemplate:
    """Build a daily quest template from raw JSON content."""
    template_id = str(raw["id"])
    domain = str(raw["domain"])
    if domain not in DOMAIN_IDS:
        raise ValueError(f"Template '{template_id}' has unknown domain '{domain}'.")
    quest_type = str(raw.get("type", "simple"))
    if quest_type not in QUEST_TYPES:
        raise ValueError(f"Template '{template_id}' has unknown type '{quest_type}'.")
    difficulty = str(raw.get("difficulty", "Easy"))
    if difficulty not in DIFFICULTIES:
        raise ValueError(f"Template '{template_id}' has unknown difficulty '{difficulty}'.")
    xp = int(raw["xp"])
    if xp <= 0:
        raise ValueError(f"Template '{template_id}' must award positive XP.")
    duration = raw.get("duration")
    return QuestTemplate(
        id=template_id,
        title=str(raw["title"]),
        description=str(raw.get("description", "")),
        domain=domain,
        type=quest_type,
        difficulty=difficulty,
        estimated_time=int(raw.get("estimated_time", 15)),
        xp=xp,
        subtasks=[str(item) for item in raw.get("subtasks", [])],
        duration=int(duration) if duration is not None else None,
    )


def _read_resource(name: str) -> Any:
    return json.loads(resources.files(CONTENT_PACKAGE).joinpath(name).read_text(encoding="utf-8-sig"))


def domains_from_payload(raw: dict[str, Any]) -> dict[str, Domain]:
    """Build and validate the domain catalog from a parsed questions document."""
    domains: dict[str, Domain] = {}
    for item in raw.get("domains", []):
        domain = _domain_from_dict(item)
        if domain.id in domains:
            raise ValueError(f"Duplicate domain id: {domain.id}")
        domains[domain.id] = domain
    _validate_domain_coverage(domains)
    _validate_unique_question_ids(domains)
    return {domain_id: domains[domain_id] for domain_id in DOMAIN_IDS}


def load_domains() -> dict[str, Domain]:
    """Load the bundled question catalog keyed by domain id, in catalog order."""
    return domains_from_payload(_read_resource(QUESTIONS_FILE))


def load_domains_from_file(path: Path) -> dict[str, Domain]:
    """Load a replacement question catalog from a JSON file."""
    return domains_from_payload(json.loads(path.read_text(encoding="utf-8-sig")))


def load_templates() -> list[QuestTemplate]:
    """Load bundled daily quest templates."""
    raw = _read_resource(TEMPLATES_FILE)
    templates = [_template_from_dict(item) for item in raw.get("templates", [])]
    seen: set[str] = set()
    for template in templates:
        if template.id in seen:
            raise ValueError(f"Duplicate template id: {template.id}")
        seen.add(template.id)
    return templates


def load_seed() -> dict[str, Any]:
    """Load the raw seed document used for a fresh profile."""
    raw = _read_resource(SEED_FILE)
    if not isinstance(raw, dict):
        raise ValueError("Seed document root must be a JSON object.")
    return raw


def _validate_domain_coverage(domains: dict[str, Domain]) -> None:
    """Validate every domain is present with exactly five questions."""
    missing = [domain_id for domain_id in DOMAIN_IDS if domain_id not in domains]
    if missing:
        raise ValueError(f"Question catalog is missing domains: {', '.join(missing)}")
    for domain in domains.values():
        if len(domain.questions) != QUESTIONS_PER_DOMAIN:
            raise ValueError(
                f"Domain '{domain.id}' has {len(domain.questions)} questions, expected {QUESTIONS_PER_DOMAIN}."
            )


def _validate_unique_question_ids(domains: dict[str, Domain]) -> None:
    """Validate that question IDs are globally unique across all domains."""
    seen: dict[int, str] = {}
    for domain in domains.values():
        for question in domain.questions:
            previous = seen.get(question.id)
            if previous is not None:
                raise ValueError(f"Duplicate question id: {question.id} (in {previous} and {domain.id})")
            seen[question.id] = domain.id
