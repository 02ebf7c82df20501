"""Functions which pick out the span to compare from a response or from a gold argument.

Response side: the canonical argument string (CAS) or the base filler (BF), optionally narrowed to its
syntactic head by a HeadResolver. Gold side: the extent, or the head falling back to the extent.
"""
import logging

from kbpalign.text.text_span import CharOffsetSpan
from kbpalign.text.text_span import EntityArgument
from kbpalign.text.text_span import FillerArgument


logger = logging.getLogger(__name__)


class UnknownMentionTypeError(TypeError):
    """A gold argument reached the aligner which is neither an entity argument nor a filler argument"""

    def __init__(self, argument):
        TypeError.__init__(self, 'Unknown gold argument type: {}'.format(type(argument)))
        self.argument = argument


def canonical_argument_span(response):
    """:type response: kbpalign.text.text_span.Response"""
    return response.canonical_argument.char_offset_span()


def base_filler_span(response):
    """:type response: kbpalign.text.text_span.Response"""
    return response.base_filler


# every CAS rule is tried before any BF rule
RESPONSE_SPAN_EXTRACTORS = (('cas', canonical_argument_span), ('bf', base_filler_span))


def extent_span(argument):
    """:type argument: kbpalign.text.text_span.EventArgument"""
    if isinstance(argument, EntityArgument):
        return argument.entity_mention.extent
    elif isinstance(argument, FillerArgument):
        return argument.filler.extent
    else:
        raise UnknownMentionTypeError(argument)


def head_or_extent_span(argument):
    """Fillers are never annotated with heads, so they always fall back to the extent

    :type argument: kbpalign.text.text_span.EventArgument
    """
    if isinstance(argument, EntityArgument):
        if argument.entity_mention.head is not None:
            return argument.entity_mention.head
        return argument.entity_mention.extent
    elif isinstance(argument, FillerArgument):
        return argument.filler.extent
    else:
        raise UnknownMentionTypeError(argument)


class HeadResolver(object):
    """A response span extractor which narrows the span found by another extractor to its syntactic head.

    parse_document is anything with a head_for(span) method returning a span or None, e.g.
    kbpalign.text.parse.ParseDocument or kbpalign.annotation.serif.SerifHeadLookup. When it is None, or it
    finds no head, the wrapped extractor's span is returned unchanged.
    """

    def __init__(self, parse_document, span_extractor):
        self.parse_document = parse_document
        self.span_extractor = span_extractor

    def __call__(self, response):
        span = self.span_extractor(response)
        if self.parse_document is None:
            return span
        head = self.parse_document.head_for(span)
        if head is None:
            return span
        return CharOffsetSpan(head.start_char_offset(), head.end_char_offset(), head.text)
