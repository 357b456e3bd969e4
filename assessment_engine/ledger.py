# ledger.py

import copy
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, Optional, Tuple

from .errors import UnknownDomainError
from .models import Answer, DomainResponse, is_answered


class ResponseLedger:
    """
    Append/overwrite map of question id -> Answer, per domain, for one assessment.

    A DomainResponse is created lazily on the first answer to a domain. Answers
    are overwritten, never deleted, except by `reset`. Recording an answer
    clears the domain's stored completeness until `set_completeness` runs again.
    """

    def __init__(self, domain_ids: Optional[Iterable[str]] = None):
        self._allowed = frozenset(domain_ids) if domain_ids is not None else None
        self._domains: Dict[str, DomainResponse] = {}

    def _check(self, domain: str):
        if self._allowed is not None and domain not in self._allowed:
            raise UnknownDomainError(domain)

    def record(self, domain: str, question_id: str, value: Any, answered_at: Optional[datetime] = None) -> Answer:
        self._check(domain)
        answered_at = answered_at or datetime.now(timezone.utc)
        answer = Answer(question_id=question_id, value=value, answered_at=answered_at)
        response = self._domains.setdefault(domain, DomainResponse(domain=domain))
        response.questions[question_id] = answer
        response.completeness = None
        response.last_updated = answered_at
        return answer

    def get(self, domain: str) -> Optional[DomainResponse]:
        return self._domains.get(domain)

    def answers(self, domain: str) -> Dict[str, Answer]:
        response = self._domains.get(domain)
        return dict(response.questions) if response else {}

    def value(self, domain: str, question_id: str) -> Any:
        answer = self.answers(domain).get(question_id)
        return answer.value if answer else None

    def answered_count(self, domain: str) -> int:
        return sum(1 for a in self.answers(domain).values() if is_answered(a.value))

    def domains(self) -> Tuple[str, ...]:
        return tuple(self._domains)

    def set_completeness(self, domain: str, completeness: int):
        response = self._domains.get(domain)
        if response is not None:
            response.completeness = int(completeness)

    def snapshot(self) -> Dict[str, DomainResponse]:
        """Deep copy of every DomainResponse, safe to hand to evaluators."""
        return copy.deepcopy(self._domains)

    def reset(self):
        self._domains.clear()

    def __contains__(self, domain) -> bool:
        return domain in self._domains

    def __len__(self) -> int:
        return len(self._domains)
