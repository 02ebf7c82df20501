from abc import ABCMeta, abstractmethod

import logging

from kbpalign.common.utils import Struct
from kbpalign.common.utils import stable_hash


logger = logging.getLogger(__name__)

span_types = Struct(ENTITY_MENTION='ENTITY_MENTION', FILLER='FILLER', ENTITY_ARGUMENT='ENTITY_ARGUMENT',
                    FILLER_ARGUMENT='FILLER_ARGUMENT')

realis_types = Struct(ACTUAL='Actual', GENERIC='Generic', OTHER='Other')
KNOWN_REALIS = frozenset([realis_types.ACTUAL, realis_types.GENERIC, realis_types.OTHER])

"""Classes here:
CharOffsetSpan
KBPString
Response

Span (this is abstract)
EntityMention(Span)
Filler(Span)

EventArgument (this is abstract)
EntityArgument(EventArgument)
FillerArgument(EventArgument)
"""


class CharOffsetSpan(object):
    """A closed range of character offsets [start, end], both ends inclusive.

    The optional text is for debugging only. It takes no part in equality or hashing, so two spans
    with the same offsets are interchangeable no matter where their text came from.
    """

    __slots__ = ('_start', '_end', '_text')

    def __init__(self, start, end, text=None):
        """
        :type start: int
        :type end: int
        :type text: str
        """
        if start > end:
            raise ValueError('Span start {} is after its end {}'.format(start, end))
        self._start = start
        self._end = end
        self._text = text

    @classmethod
    def from_string(cls, s):
        """Parses the KBP offset notation 'start-end'"""
        parts = s.split('-')
        if len(parts) != 2:
            raise ValueError('Invalid span {}'.format(s))
        return cls(int(parts[0]), int(parts[1]))

    @property
    def text(self):
        return self._text

    def start_char_offset(self):
        return self._start

    def end_char_offset(self):
        return self._end

    def length(self):
        return self._end - self._start + 1

    def encloses(self, other):
        """
        :type other: CharOffsetSpan
        :rtype: bool
        """
        return self._start <= other._start and other._end <= self._end

    def overlaps(self, other):
        """
        :type other: CharOffsetSpan
        :rtype: bool
        """
        return self._start <= other._end and other._start <= self._end

    def __eq__(self, other):
        if not isinstance(other, CharOffsetSpan):
            return False
        return self._start == other._start and self._end == other._end

    def __ne__(self, other):
        return not self.__eq__(other)

    def __hash__(self):
        return hash((self._start, self._end))

    def __repr__(self):
        if self._text is not None:
            return 'CharOffsetSpan({},{},"{}")'.format(self._start, self._end, self._text)
        return 'CharOffsetSpan({},{})'.format(self._start, self._end)

    def to_string(self):
        return '{}-{}'.format(self._start, self._end)

    def to_json(self):
        d = dict()
        d['start'] = self._start
        d['end'] = self._end
        if self._text is not None:
            d['text'] = self._text
        return d


class KBPString(object):
    """A string from the document together with the offsets it was taken from"""

    __slots__ = ('_string', '_span')

    def __init__(self, string, span):
        """
        :type string: str
        :type span: CharOffsetSpan
        """
        self._string = string
        self._span = span

    @property
    def string(self):
        return self._string

    def char_offset_span(self):
        return self._span

    def __eq__(self, other):
        if not isinstance(other, KBPString):
            return False
        return self._string == other._string and self._span == other._span

    def __hash__(self):
        return hash((self._string, self._span))

    def __repr__(self):
        return 'KBPString("{}",{})'.format(self._string, self._span.to_string())


class Response(object):
    """A system-produced event argument.

    :docid: document the argument was extracted from
    :event_type: e.g. Conflict.Attack
    :role: argument role, in the response's own vocabulary
    :canonical_argument: KBPString of the canonical argument string (CAS)
    :base_filler: CharOffsetSpan of the base filler (BF)
    :predicate_justifications: frozenset of CharOffsetSpan
    :additional_arg_justifications: frozenset of CharOffsetSpan
    :realis: one of Actual, Generic, Other

    Responses are immutable; equality and hashing cover every field.
    """

    __slots__ = ('_docid', '_event_type', '_role', '_canonical_argument', '_base_filler',
                 '_predicate_justifications', '_additional_arg_justifications', '_realis', '_response_id')

    def __init__(self, docid, event_type, role, canonical_argument, base_filler,
                 predicate_justifications=(), additional_arg_justifications=(), realis=realis_types.ACTUAL):
        if realis not in KNOWN_REALIS:
            raise ValueError('Unknown realis "{}", expected one of: {}'.format(realis, ','.join(sorted(KNOWN_REALIS))))
        self._docid = docid
        self._event_type = event_type
        self._role = role
        self._canonical_argument = canonical_argument
        self._base_filler = base_filler
        self._predicate_justifications = frozenset(predicate_justifications)
        self._additional_arg_justifications = frozenset(additional_arg_justifications)
        self._realis = realis
        self._response_id = stable_hash(
            docid, event_type, role, canonical_argument.string, canonical_argument.char_offset_span().to_string(),
            base_filler.to_string(),
            ','.join(sorted(s.to_string() for s in self._predicate_justifications)),
            ','.join(sorted(s.to_string() for s in self._additional_arg_justifications)),
            realis)

    @property
    def docid(self):
        return self._docid

    @property
    def event_type(self):
        return self._event_type

    @property
    def role(self):
        return self._role

    @property
    def canonical_argument(self):
        """:rtype: KBPString"""
        return self._canonical_argument

    @property
    def base_filler(self):
        """:rtype: CharOffsetSpan"""
        return self._base_filler

    @property
    def predicate_justifications(self):
        return self._predicate_justifications

    @property
    def additional_arg_justifications(self):
        return self._additional_arg_justifications

    @property
    def realis(self):
        return self._realis

    @property
    def response_id(self):
        """Stable across runs, so warnings and output files can be joined back to the input"""
        return self._response_id

    def _key(self):
        return (self._docid, self._event_type, self._role, self._canonical_argument, self._base_filler,
                self._predicate_justifications, self._additional_arg_justifications, self._realis)

    def __eq__(self, other):
        if not isinstance(other, Response):
            return False
        return self._key() == other._key()

    def __hash__(self):
        return hash(self._key())

    def __repr__(self):
        return self.to_string()

    def to_string(self):
        return '{}: {}/{} "{}" ({}) BF={} {}'.format(
            self._response_id[:10], self._event_type, self._role, self._canonical_argument.string,
            self._canonical_argument.char_offset_span().to_string(), self._base_filler.to_string(), self._realis)


class Span(metaclass=ABCMeta):
    """An abstract class for gold mentions backed by an extent in the document
    :extent: CharOffsetSpan
    """

    def __init__(self, id, extent):
        self.id = id
        self.extent = extent

    def start_char_offset(self):
        return self.extent.start_char_offset()

    def end_char_offset(self):
        return self.extent.end_char_offset()

    @property
    def text(self):
        return self.extent.text

    @abstractmethod
    def span_type(self):
        """Return a string representing the type of span this is."""
        pass


class EntityMention(Span):
    """A mention of a gold entity. It has an extent and, when annotated, a head.
    entity_id: the id of the coreferent entity this mention belongs to
    """

    def __init__(self, id, extent, head=None, entity_id=None, label=None):
        """
        :type extent: CharOffsetSpan
        :type head: CharOffsetSpan
        """
        Span.__init__(self, id, extent)
        self.head = head
        self.entity_id = entity_id
        self.label = label

    def span_type(self):
        return span_types.ENTITY_MENTION

    def to_string(self):
        return '%s: %s (%d,%d) "%s"' % (self.span_type(), self.id, self.start_char_offset(), self.end_char_offset(),
                                       self.text)


class Filler(Span):
    """A non-entity argument such as a time expression, a crime, or a sentence.
    label: the filler type, e.g. time, crime, sentence
    """

    def __init__(self, id, extent, label=None):
        Span.__init__(self, id, extent)
        self.label = label

    def span_type(self):
        return span_types.FILLER

    def to_string(self):
        return '%s: %s (%d,%d) "%s" %s' % (self.span_type(), self.id, self.start_char_offset(),
                                          self.end_char_offset(), self.text, self.label)


class EventArgument(metaclass=ABCMeta):
    """A gold argument of an event mention: a role label in the gold ontology plus the mention filling it.

    There are exactly two kinds, EntityArgument and FillerArgument.
    """

    def __init__(self, role):
        self.role = role

    @abstractmethod
    def mention_id(self):
        pass

    @abstractmethod
    def scoring_id(self):
        """The id the scorer counts matches against: the entity for entity arguments, the filler itself for fillers"""
        pass

    @abstractmethod
    def span_type(self):
        pass

    def __repr__(self):
        return '{}({}, {})'.format(type(self).__name__, self.role, self.mention_id())


class EntityArgument(EventArgument):
    def __init__(self, role, entity_mention):
        """:type entity_mention: EntityMention"""
        EventArgument.__init__(self, role)
        self.entity_mention = entity_mention

    def mention_id(self):
        return self.entity_mention.id

    def scoring_id(self):
        if self.entity_mention.entity_id is not None:
            return self.entity_mention.entity_id
        return self.entity_mention.id

    def span_type(self):
        return span_types.ENTITY_ARGUMENT


class FillerArgument(EventArgument):
    def __init__(self, role, filler):
        """:type filler: Filler"""
        EventArgument.__init__(self, role)
        self.filler = filler

    def mention_id(self):
        return self.filler.id

    def scoring_id(self):
        return self.filler.id

    def span_type(self):
        return span_types.FILLER_ARGUMENT
