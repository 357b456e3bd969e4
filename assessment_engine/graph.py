# graph.py

import dataclasses
from typing import Any, Iterator, Mapping, Optional, Sequence, Set, Tuple

from .models import Answer, Conditional, Domain, Question, as_number, is_answered, value_key


def _raw(entry: Any) -> Any:
    return entry.value if isinstance(entry, Answer) else entry


def trigger_fires(conditional: Conditional, value: Any, threshold: float) -> bool:
    """
    Decide whether a trigger answer reveals a follow-up.

    With `show_if` values the (normalised) answer must be one of them; for a
    multi-choice answer any selected option may match. Without `show_if` the
    answer must be numeric and reach the domain's trigger threshold.

    :param conditional: the follow-up's conditional descriptor
    :param value: current answer value of the trigger question
    :param threshold: the owning domain's numeric trigger threshold
    """
    if not is_answered(value):
        return False
    if conditional.show_if:
        if isinstance(value, (list, tuple, set, frozenset)):
            return any(value_key(v) in conditional.show_if for v in value)
        return value_key(value) in conditional.show_if
    number = as_number(value)
    return number is not None and number >= threshold


class QuestionGraph:
    """
    The respondent-specific question sequence of one domain.

    Iterating walks the base questions in authored order and emits each
    realized follow-up immediately after the question that triggers it
    (recursively, so chained follow-ups stay contiguous). A follow-up is
    realized when its trigger currently fires or when it already holds an
    answer; only the first kind is required.

    The graph holds no iteration state: every `iter()` recomputes the walk from
    the same snapshot of responses, so repeated iteration yields the same order.
    """

    def __init__(self, domain: Domain, base_questions: Sequence[Question], responses: Mapping[str, Any]):
        self.domain = domain
        self._base = tuple(base_questions)
        self._responses = {qid: _raw(entry) for qid, entry in responses.items()}

    def __iter__(self) -> Iterator[Question]:
        seen: Set[str] = set()
        for question in self._base:
            yield from self._expand(question, seen)

    def _expand(self, question: Question, seen: Set[str]) -> Iterator[Question]:
        if question.id in seen:
            return
        seen.add(question.id)
        yield question

        value = self._responses.get(question.id)
        for follow_up in self.domain.follow_ups_for(question.id):
            active = trigger_fires(follow_up.conditional, value, self.domain.trigger_threshold)
            if active or is_answered(self._responses.get(follow_up.id)):
                yield from self._expand(dataclasses.replace(follow_up, required=active), seen)

    def __len__(self) -> int:
        return sum(1 for _ in self)

    def __contains__(self, question_id) -> bool:
        return any(q.id == question_id for q in self)

    def questions(self) -> Tuple[Question, ...]:
        return tuple(self)

    def ids(self) -> Tuple[str, ...]:
        return tuple(q.id for q in self)

    def position(self, question_id: str) -> Optional[int]:
        for i, q in enumerate(self):
            if q.id == question_id:
                return i
        return None

    def follow_ups(self) -> Tuple[Question, ...]:
        """Realized follow-ups, in graph order."""
        return tuple(q for q in self if q.is_follow_up)

    def value(self, question_id: str) -> Any:
        return self._responses.get(question_id)


def build_graph(domain: Domain, base_questions: Sequence[Question], responses: Mapping[str, Any]) -> QuestionGraph:
    """
    Expand a domain's base questions into the dynamic question graph.

    :param domain: the catalog Domain (supplies follow-ups and trigger threshold)
    :param base_questions: base questions in authored order (possibly filtered by industry)
    :param responses: question id -> Answer (or raw value) for this domain
    :return: a lazy, restartable QuestionGraph
    """
    return QuestionGraph(domain, base_questions, responses)
