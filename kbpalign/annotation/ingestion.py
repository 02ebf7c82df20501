import codecs
import json
import logging

from kbpalign.annotation.serif import read_serif_head_lookup
from kbpalign.common.utils import only1
from kbpalign.text.parse import ParseDocument
from kbpalign.text.parse import ParseNode
from kbpalign.text.parse import ParsedSentence
from kbpalign.text.text_span import CharOffsetSpan
from kbpalign.text.text_span import EntityArgument
from kbpalign.text.text_span import EntityMention
from kbpalign.text.text_span import Filler
from kbpalign.text.text_span import FillerArgument
from kbpalign.text.text_span import KBPString
from kbpalign.text.text_span import Response
from kbpalign.text.text_theory import Entity
from kbpalign.text.text_theory import Event
from kbpalign.text.text_theory import EventMention
from kbpalign.text.text_theory import GoldDocument

logger = logging.getLogger(__name__)

NUM_RESPONSE_COLUMNS = 11


class InputFileType(object):
    def __init__(self):
        self.gold_file = None       # gold annotation, JSON
        self.response_file = None   # system responses, KBP argument TSV
        self.parse_file = None      # constituency parse, JSON
        self.serif_file = None      # SerifXML with parses


class DocumentInput(object):
    """Everything needed to align the responses of one document"""

    def __init__(self, docid, gold_document, responses, parse_document=None):
        """
        :type gold_document: kbpalign.text.text_theory.GoldDocument
        :type responses: list[kbpalign.text.text_span.Response]
        """
        self.docid = docid
        self.gold_document = gold_document
        self.responses = responses
        self.parse_document = parse_document


def parse_filelist_line(line):
    """
    :return: InputFileType
    """
    input_file_type = InputFileType()
    for file in line.strip().split():
        if file.startswith('GOLD:'):
            input_file_type.gold_file = file[len('GOLD:'):]
        elif file.startswith('RESPONSES:'):
            input_file_type.response_file = file[len('RESPONSES:'):]
        elif file.startswith('PARSE:'):
            input_file_type.parse_file = file[len('PARSE:'):]
        elif file.startswith('SERIF:'):
            input_file_type.serif_file = file[len('SERIF:'):]
        else:
            raise ValueError('Unrecognized filelist entry "{}"'.format(file))

    if input_file_type.gold_file is None or input_file_type.response_file is None:
        raise ValueError('GOLD and RESPONSES must be present!')
    if input_file_type.parse_file is not None and input_file_type.serif_file is not None:
        raise ValueError('At most one of PARSE and SERIF may be given')
    return input_file_type


def _parse_span_set(s):
    """A comma-separated set of 'start-end' offsets, or NIL for the empty set"""
    if s == 'NIL':
        return frozenset()
    spans = frozenset(CharOffsetSpan.from_string(part.strip()) for part in s.split(',') if part.strip())
    if len(spans) == 0:
        raise ValueError('Empty span sets must be indicated by NIL')
    return spans


def response_from_fields(parts):
    """Builds a Response from the columns of a KBP argument line, without the leading response id column.

    The columns are: docid, event type, role, CAS string, CAS offsets, predicate justifications, base filler,
    additional argument justifications, realis.
    """
    return Response(parts[0], parts[1], parts[2],
                    KBPString(parts[3], CharOffsetSpan.from_string(parts[4])),
                    CharOffsetSpan.from_string(parts[6]),
                    predicate_justifications=_parse_span_set(parts[5]),
                    additional_arg_justifications=_parse_span_set(parts[7]),
                    realis=parts[8])


def read_responses(filepath):
    """Reads a KBP system output file: one tab-separated response per line. Blank lines and lines starting with #
    are skipped. The confidence column is checked to be numeric but not kept.

    :rtype: list[kbpalign.text.text_span.Response]
    """
    ret = []
    with codecs.open(filepath, 'r', encoding='utf-8') as f:
        for line_no, line in enumerate(f, start=1):
            line = line.rstrip('\r\n')
            if len(line) == 0 or line.startswith('#'):
                continue
            parts = line.split('\t')
            if len(parts) != NUM_RESPONSE_COLUMNS:
                raise ValueError('{}: expected {} tab-separated columns, but got {} on line {}'.format(
                    filepath, NUM_RESPONSE_COLUMNS, len(parts), line_no))
            try:
                float(parts[10])
                ret.append(response_from_fields(parts[1:]))
            except ValueError as e:
                raise ValueError('{}: invalid line {}: {} ({})'.format(filepath, line_no, line, e)) from e
    logger.info('Read {} responses from {}'.format(len(ret), filepath))
    return ret


def _span_from_json(d):
    return CharOffsetSpan(d['start'], d['end'], d.get('text'))


def gold_document_from_json(d):
    """Raises ValueError naming the document when a required field is missing or has the wrong shape

    :type d: dict
    :rtype: kbpalign.text.text_theory.GoldDocument
    """
    try:
        return _gold_document_from_json(d)
    except (KeyError, TypeError, AttributeError) as e:
        raise ValueError('Malformed gold annotation for document {}: {} {}'.format(
            d.get('doc_id') if isinstance(d, dict) else None, type(e).__name__, e)) from e


def _gold_document_from_json(d):
    doc = GoldDocument(d['doc_id'])

    entity_mentions = dict()
    for entity_d in d.get('entities', []):
        entity = Entity(entity_d['id'])
        for m in entity_d['mentions']:
            head = _span_from_json(m['head']) if m.get('head') is not None else None
            em = EntityMention(m['id'], _span_from_json(m), head=head, entity_id=entity.id, label=m.get('type'))
            entity.add_mention(em)
            entity_mentions[em.id] = em
        doc.add_entity(entity)

    fillers = dict()
    for filler_d in d.get('fillers', []):
        filler = Filler(filler_d['id'], _span_from_json(filler_d), label=filler_d.get('type'))
        doc.add_filler(filler)
        fillers[filler.id] = filler

    for event_d in d.get('events', []):
        event = Event(event_d['id'])
        for em_d in event_d['mentions']:
            event_mention = EventMention(em_d['id'], em_d.get('type'))
            for arg_d in em_d.get('arguments', []):
                if not only1([arg_d.get('entity_mention_id') is not None, arg_d.get('filler_id') is not None]):
                    raise ValueError('Argument {} of event mention {} in {} must reference exactly one of an entity '
                                     'mention or a filler'.format(arg_d, em_d['id'], doc.docid))
                if arg_d.get('entity_mention_id') is not None:
                    mention_id = arg_d['entity_mention_id']
                    if mention_id not in entity_mentions:
                        raise ValueError('Event mention {} in {} references unknown entity mention {}'.format(
                            em_d['id'], doc.docid, mention_id))
                    event_mention.add_argument(EntityArgument(arg_d['role'], entity_mentions[mention_id]))
                else:
                    filler_id = arg_d['filler_id']
                    if filler_id not in fillers:
                        raise ValueError('Event mention {} in {} references unknown filler {}'.format(
                            em_d['id'], doc.docid, filler_id))
                    event_mention.add_argument(FillerArgument(arg_d['role'], fillers[filler_id]))
            event.add_event_mention(event_mention)
        doc.add_event(event)
    return doc


def read_gold_document(filepath):
    with codecs.open(filepath, 'r', encoding='utf-8') as f:
        try:
            doc = gold_document_from_json(json.load(f))
        except ValueError as e:
            raise ValueError('{}: {}'.format(filepath, e)) from e
    logger.info('Read {} gold arguments for {} from {}'.format(len(doc.arguments()), doc.docid, filepath))
    return doc


def parse_node_from_json(d):
    children = [parse_node_from_json(c) for c in d.get('children', [])]
    return ParseNode(d['tag'], _span_from_json(d), children, d.get('head'))


def parse_document_from_json(d):
    """:rtype: kbpalign.text.parse.ParseDocument"""
    try:
        return _parse_document_from_json(d)
    except (KeyError, TypeError, AttributeError) as e:
        raise ValueError('Malformed parse for document {}: {} {}'.format(
            d.get('doc_id') if isinstance(d, dict) else None, type(e).__name__, e)) from e


def _parse_document_from_json(d):
    sentences = []
    for sentence_d in d.get('sentences', []):
        root = parse_node_from_json(sentence_d['tree']) if sentence_d.get('tree') is not None else None
        sentences.append(ParsedSentence(CharOffsetSpan(sentence_d['start'], sentence_d['end']), root))
    return ParseDocument(d['doc_id'], sentences)


def read_parse_document(filepath):
    with codecs.open(filepath, 'r', encoding='utf-8') as f:
        try:
            return parse_document_from_json(json.load(f))
        except ValueError as e:
            raise ValueError('{}: {}'.format(filepath, e)) from e


def prepare_documents(filelists):
    """
    :type filelists: list[str]
    :rtype: list[DocumentInput]
    """
    docs = []
    for line in filelists:
        if len(line.strip()) == 0:
            continue
        input_file_type = parse_filelist_line(line)

        gold_document = read_gold_document(input_file_type.gold_file)
        responses = read_responses(input_file_type.response_file)

        parse_document = None
        if input_file_type.parse_file is not None:
            parse_document = read_parse_document(input_file_type.parse_file)
        elif input_file_type.serif_file is not None:
            parse_document = read_serif_head_lookup(input_file_type.serif_file)

        if parse_document is not None and parse_document.docid != gold_document.docid:
            raise ValueError('Parse is for document {} but gold annotation is for {}'.format(
                parse_document.docid, gold_document.docid))
        for response in responses:
            if response.docid != gold_document.docid:
                raise ValueError('{} contains a response for document {}, expected {}'.format(
                    input_file_type.response_file, response.docid, gold_document.docid))

        docs.append(DocumentInput(gold_document.docid, gold_document, responses, parse_document))
    return docs


def read_filelist(filepath):
    with codecs.open(filepath, 'r', encoding='utf-8') as f:
        return [line.strip() for line in f if len(line.strip()) > 0]
