# profiles.py

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, Iterable, Mapping, Optional, Tuple

from . import config
from .errors import CatalogError
from .rules import registered_rule_names

logger = logging.getLogger(__name__)

# Nominal importance range is 0.5-1.5; anything outside this band is an authoring mistake.
MIN_WEIGHT = 0.1
MAX_WEIGHT = 2.0


@dataclass(frozen=True)
class CrossDomainRule:
    name: str
    domains: Tuple[str, ...]
    # (domain, question id) pairs, in the order the named predicate reads them
    questions: Tuple[Tuple[str, str], ...]
    rule: str
    message: str
    impact_on_timeline: bool = True


@dataclass(frozen=True)
class BusinessLogicRule:
    name: str
    domain: str
    question_ids: Tuple[str, ...]
    rule: str
    message: str


@dataclass(frozen=True)
class BusinessModelProfile:
    business_model: str
    required_domains: FrozenSet[str]
    optional_domains: FrozenSet[str]
    domain_weighting: Dict[str, float] = field(default_factory=dict, hash=False, compare=False)
    cross_domain_rules: Tuple[CrossDomainRule, ...] = ()
    business_logic_rules: Tuple[BusinessLogicRule, ...] = ()
    key_metrics: Tuple[str, ...] = ()

    def weight(self, domain: Optional[str]) -> float:
        return self.domain_weighting.get(domain, 1.0)


class ProfileRegistry:
    """
    Static lookup of business-model profiles, keyed by business-model tag.

    Constructed once via `load_profiles` and passed to the engine.
    """

    def __init__(self, profiles: Iterable[BusinessModelProfile]):
        self._profiles = {p.business_model: p for p in profiles}

    @property
    def tags(self) -> Tuple[str, ...]:
        return tuple(self._profiles)

    def get(self, business_model: Optional[str]) -> Optional[BusinessModelProfile]:
        """Return the profile for a tag, or None for an unknown (or missing) tag."""
        if not business_model:
            return None
        return self._profiles.get(business_model)

    def weights(self, business_model: Optional[str]) -> Dict[str, float]:
        profile = self.get(business_model)
        return dict(profile.domain_weighting) if profile else {}

    def key_metrics(self, business_model: Optional[str]) -> Tuple[str, ...]:
        profile = self.get(business_model)
        return profile.key_metrics if profile else ()

    def __contains__(self, business_model) -> bool:
        return business_model in self._profiles

    def __len__(self) -> int:
        return len(self._profiles)


def _check_domain(tag: str, domain: str, catalog) -> None:
    if domain not in catalog:
        raise CatalogError(f"Profile {tag!r} references unknown domain {domain!r}")


def _check_question(tag: str, rule_name: str, domain: str, question_id: str, catalog) -> None:
    if not catalog.has_question(domain, question_id):
        raise CatalogError(
            f"Rule {rule_name!r} in profile {tag!r} references unknown question {domain}/{question_id}"
        )


def _build_profile(tag: str, raw: Mapping[str, Any], catalog, known_rules) -> BusinessModelProfile:
    required = frozenset(raw.get("required_domains", ()))
    optional = frozenset(raw.get("optional_domains", ()))
    for d in required | optional:
        _check_domain(tag, d, catalog)
    if required & optional:
        raise CatalogError(f"Profile {tag!r} lists {sorted(required & optional)} as both required and optional")

    weights = {}
    for d, w in (raw.get("domain_weighting") or {}).items():
        _check_domain(tag, d, catalog)
        if not (MIN_WEIGHT <= float(w) <= MAX_WEIGHT):
            raise CatalogError(f"Profile {tag!r} weight for {d!r} is out of range: {w}")
        weights[d] = float(w)

    cross = []
    for r in raw.get("cross_domain", ()):
        domains = tuple(r["domains"])
        for d in domains:
            _check_domain(tag, d, catalog)
        questions = tuple((d, qid) for d, qid in r.get("questions", ()))
        for d, qid in questions:
            if d not in domains:
                raise CatalogError(f"Rule {r['name']!r} reads {d!r} but does not declare it")
            _check_question(tag, r["name"], d, qid, catalog)
        cross.append(
            CrossDomainRule(
                name=r["name"],
                domains=domains,
                questions=questions,
                rule=r.get("rule", ""),
                message=r.get("message", ""),
                impact_on_timeline=bool(r.get("impact_on_timeline", True)),
            )
        )

    logic = []
    for r in raw.get("business_logic", ()):
        _check_domain(tag, r["domain"], catalog)
        for qid in r.get("question_ids", ()):
            _check_question(tag, r["name"], r["domain"], qid, catalog)
        logic.append(
            BusinessLogicRule(
                name=r["name"],
                domain=r["domain"],
                question_ids=tuple(r.get("question_ids", ())),
                rule=r.get("rule", ""),
                message=r.get("message", ""),
            )
        )

    if known_rules:
        for rule in [*cross, *logic]:
            if rule.name not in known_rules:
                logger.warning("Profile %r uses rule %r with no predicate; it will be reported, not applied", tag, rule.name)

    return BusinessModelProfile(
        business_model=tag,
        required_domains=required,
        optional_domains=optional,
        domain_weighting=weights,
        cross_domain_rules=tuple(cross),
        business_logic_rules=tuple(logic),
        key_metrics=tuple(raw.get("key_metrics", ())),
    )


def load_profiles(catalog, business_models: Mapping[str, Mapping[str, Any]] = config.BUSINESS_MODELS) -> ProfileRegistry:
    """
    Build the profile registry and validate it against the question catalog.

    Every domain and question id a profile mentions must exist in `catalog`.
    Rule names without a registered predicate are allowed (they never fire)
    but are logged.

    :param catalog: a QuestionCatalog
    :param business_models: tag -> raw profile definition
    :raises CatalogError: when a profile references unknown domains or questions
    """
    known = registered_rule_names()
    registry = ProfileRegistry(_build_profile(tag, raw, catalog, known) for tag, raw in business_models.items())
    logger.info("Loaded %d business-model profiles: %s", len(registry), ", ".join(registry.tags))
    return registry
