import pytest

from kbpalign.alignment.extractors import HeadResolver
from kbpalign.alignment.extractors import UnknownMentionTypeError
from kbpalign.alignment.extractors import base_filler_span
from kbpalign.alignment.extractors import canonical_argument_span
from kbpalign.alignment.extractors import extent_span
from kbpalign.alignment.extractors import head_or_extent_span
from kbpalign.text.parse import ParseDocument
from kbpalign.text.parse import ParseNode
from kbpalign.text.parse import ParsedSentence
from kbpalign.text.text_span import EventArgument

from builders import entity_argument, filler_argument, response, span


class RelationArgument(EventArgument):
    """A third kind of gold argument, which the extractors do not know about"""

    def mention_id(self):
        return 'r1'

    def scoring_id(self):
        return 'r1'

    def span_type(self):
        return 'RELATION_ARGUMENT'


def noun_phrase_parse():
    # "the president" = [0,12], with "president" [4,12] as head
    the = ParseNode('DT', span(0, 2, 'the'))
    president = ParseNode('NN', span(4, 12, 'president'))
    np = ParseNode('NP', span(0, 12), [the, president], head_index=1)
    return ParseDocument('doc', [ParsedSentence(span(0, 30), np)])


def test_response_extractors():
    r = response((10, 20), bf=(14, 20))
    assert canonical_argument_span(r) == span(10, 20)
    assert base_filler_span(r) == span(14, 20)


def test_gold_extractors_fall_back_to_extent():
    with_head = entity_argument('m1', (10, 25), head=(22, 24))
    without_head = entity_argument('m2', (10, 25))
    filler = filler_argument('f1', (30, 40))

    assert extent_span(with_head) == span(10, 25)
    assert head_or_extent_span(with_head) == span(22, 24)
    assert head_or_extent_span(without_head) == span(10, 25)
    assert extent_span(filler) == span(30, 40)
    assert head_or_extent_span(filler) == span(30, 40)


def test_unknown_argument_kind_is_fatal():
    with pytest.raises(UnknownMentionTypeError):
        extent_span(RelationArgument('Agent'))
    with pytest.raises(TypeError):
        head_or_extent_span(RelationArgument('Agent'))


def test_head_resolver_narrows_to_terminal_head():
    resolver = HeadResolver(noun_phrase_parse(), canonical_argument_span)
    head = resolver(response((0, 12)))
    assert head == span(4, 12)
    assert head.text == 'president'


def test_head_resolver_is_identity_without_refinement():
    # no parse at all
    assert HeadResolver(None, canonical_argument_span)(response((0, 12))) == span(0, 12)
    # no constituent exactly covers the span
    resolver = HeadResolver(noun_phrase_parse(), canonical_argument_span)
    assert resolver(response((0, 5))) == span(0, 5)
    # outside every sentence
    assert resolver(response((50, 60))) == span(50, 60)


def test_head_resolver_is_idempotent():
    resolver = HeadResolver(noun_phrase_parse(), canonical_argument_span)
    r = response((0, 12))
    assert resolver(r) == resolver(r) == span(4, 12)
