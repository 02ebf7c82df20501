import logging
from collections import namedtuple

from kbpalign.alignment.checkers import And
from kbpalign.alignment.checkers import ContainmentSpanChecker
from kbpalign.alignment.checkers import ExactSpanChecker
from kbpalign.alignment.checkers import MappedRolesMatch
from kbpalign.alignment.extractors import HeadResolver
from kbpalign.alignment.extractors import RESPONSE_SPAN_EXTRACTORS
from kbpalign.alignment.extractors import extent_span
from kbpalign.alignment.extractors import head_or_extent_span


logger = logging.getLogger(__name__)


Strategy = namedtuple('Strategy', ['name', 'checker'])
"""A named alignment rule. name is e.g. 'cas/exact-extent+role'; checker is a MentionResponseChecker."""


def create_response_matching_strategy(role_mapper, parse_document=None):
    """Builds the ordered alignment rules, strictest first.

    For each response span (CAS, then BF) the rules go: exact matches gated on the mapped role, then the same
    exact matches without the role, then containment with the role, then containment alone. Every CAS rule is
    tried before any BF rule.

    :type role_mapper: kbpalign.ontology.RoleMapper
    :param parse_document: an object with head_for(span), or None to compare response spans without head finding
    :rtype: tuple[Strategy]
    """
    ret = []
    mapped_roles_match = MappedRolesMatch(role_mapper)

    for prefix, response_extractor in RESPONSE_SPAN_EXTRACTORS:
        if parse_document is not None:
            response_head_extractor = HeadResolver(parse_document, response_extractor)
        else:
            response_head_extractor = response_extractor

        # atoms out of which the rules are built
        response_matches_extent_exactly = ExactSpanChecker(response_extractor, extent_span)
        response_head_matches_head_exactly = ExactSpanChecker(response_head_extractor, head_or_extent_span)
        response_head_matches_extent_exactly = ExactSpanChecker(response_head_extractor, extent_span)
        response_matches_head_exactly = ExactSpanChecker(response_extractor, head_or_extent_span)
        containment = ContainmentSpanChecker(response_extractor, response_head_extractor, extent_span,
                                             head_or_extent_span)

        rules = [
            ('exact-extent+role', And(response_matches_extent_exactly, mapped_roles_match)),
            ('exact-head+role', And(response_head_matches_head_exactly, mapped_roles_match)),
            ('head-to-extent+role', And(response_head_matches_extent_exactly, mapped_roles_match)),
            ('extent-to-head+role', And(response_matches_head_exactly, mapped_roles_match)),
            ('exact-extent', response_matches_extent_exactly),
            ('exact-head', response_head_matches_head_exactly),
            ('head-to-extent', response_head_matches_extent_exactly),
            ('extent-to-head', response_matches_head_exactly),
            ('containment+role', And(containment, mapped_roles_match)),
            ('containment', containment),
        ]
        for name, checker in rules:
            ret.append(Strategy('{}/{}'.format(prefix, name), checker))

    return tuple(ret)
