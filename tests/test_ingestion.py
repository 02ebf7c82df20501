import json

import pytest

from kbpalign.annotation.ingestion import gold_document_from_json
from kbpalign.annotation.ingestion import parse_document_from_json
from kbpalign.annotation.ingestion import parse_filelist_line
from kbpalign.annotation.ingestion import prepare_documents
from kbpalign.annotation.ingestion import read_filelist
from kbpalign.annotation.ingestion import read_gold_document
from kbpalign.annotation.ingestion import read_parse_document
from kbpalign.annotation.ingestion import read_responses
from kbpalign.text.text_span import EntityArgument
from kbpalign.text.text_span import FillerArgument

from builders import DOCID, span


GOLD = {
    'doc_id': DOCID,
    'entities': [
        {'id': 'E1', 'mentions': [
            {'id': 'm1', 'start': 10, 'end': 25, 'text': 'the army of Iraq', 'type': 'ORG',
             'head': {'start': 14, 'end': 17}},
            {'id': 'm2', 'start': 40, 'end': 42, 'text': 'its'},
        ]},
    ],
    'fillers': [
        {'id': 'f1', 'start': 60, 'end': 70, 'type': 'time'},
    ],
    'events': [
        {'id': 'EV1', 'mentions': [
            {'id': 'EM1', 'type': 'Conflict.Attack', 'arguments': [
                {'role': 'Attacker', 'entity_mention_id': 'm1'},
                {'role': 'Time', 'filler_id': 'f1'},
            ]},
            {'id': 'EM2', 'type': 'Conflict.Attack', 'arguments': [
                {'role': 'Attacker', 'entity_mention_id': 'm2'},
            ]},
        ]},
    ],
}

PARSE = {
    'doc_id': DOCID,
    'sentences': [
        {'start': 0, 'end': 30, 'tree': {'tag': 'NP', 'start': 0, 'end': 12, 'head': 1, 'children': [
            {'tag': 'DT', 'start': 0, 'end': 2, 'text': 'the'},
            {'tag': 'NN', 'start': 4, 'end': 12, 'text': 'president'},
        ]}},
        {'start': 31, 'end': 50, 'tree': None},
    ],
}


def response_line(response_id='r1', docid=DOCID, cas='10-25', bf='14-17', realis='Actual', confidence='0.9',
                  pj='0-40'):
    return '\t'.join([response_id, docid, 'Conflict.Attack', 'Attacker', 'the army of Iraq', cas, pj, bf, 'NIL',
                      realis, confidence])


def write(tmp_path, name, content):
    filepath = tmp_path / name
    filepath.write_text(content, encoding='utf-8')
    return str(filepath)


def test_parse_filelist_line():
    line = 'GOLD:/data/a.json RESPONSES:/data/a.tsv PARSE:/data/a.parse.json'
    input_file_type = parse_filelist_line(line)
    assert input_file_type.gold_file == '/data/a.json'
    assert input_file_type.response_file == '/data/a.tsv'
    assert input_file_type.parse_file == '/data/a.parse.json'
    assert input_file_type.serif_file is None


@pytest.mark.parametrize('line', [
    'GOLD:/data/a.json',
    'RESPONSES:/data/a.tsv',
    'GOLD:/data/a.json RESPONSES:/data/a.tsv TEXT:/data/a.txt',
    'GOLD:a RESPONSES:b PARSE:c SERIF:d',
])
def test_parse_filelist_line_rejects(line):
    with pytest.raises(ValueError):
        parse_filelist_line(line)


def test_read_responses(tmp_path):
    content = '\n'.join(['# system output', response_line(), '', response_line('r2', pj='NIL', realis='Generic')])
    responses = read_responses(write(tmp_path, 'responses.tsv', content + '\n'))
    assert len(responses) == 2
    first = responses[0]
    assert first.docid == DOCID
    assert first.role == 'Attacker'
    assert first.canonical_argument.string == 'the army of Iraq'
    assert first.canonical_argument.char_offset_span() == span(10, 25)
    assert first.base_filler == span(14, 17)
    assert first.predicate_justifications == frozenset([span(0, 40)])
    assert first.additional_arg_justifications == frozenset()
    assert responses[1].predicate_justifications == frozenset()
    assert responses[1].realis == 'Generic'


@pytest.mark.parametrize('line', [
    response_line(cas='10'),
    response_line(confidence='high'),
    response_line(realis='Maybe'),
    response_line(cas='25-10'),
    response_line()[:-4],
])
def test_read_responses_rejects_malformed_lines(tmp_path, line):
    filepath = write(tmp_path, 'responses.tsv', response_line() + '\n' + line + '\n')
    with pytest.raises(ValueError) as e:
        read_responses(filepath)
    assert 'line 2' in str(e.value)


def test_gold_document_from_json():
    doc = gold_document_from_json(GOLD)
    assert doc.docid == DOCID
    arguments = doc.arguments()
    assert [a.mention_id() for a in arguments] == ['m1', 'f1', 'm2']
    assert isinstance(arguments[0], EntityArgument)
    assert isinstance(arguments[1], FillerArgument)
    assert arguments[0].entity_mention.head == span(14, 17)
    assert arguments[2].entity_mention.head is None
    assert doc.scoring_ids() == ['E1', 'f1']


def test_gold_document_rejects_bad_references():
    d = json.loads(json.dumps(GOLD))
    d['events'][0]['mentions'][0]['arguments'].append({'role': 'Target', 'entity_mention_id': 'm9'})
    with pytest.raises(ValueError):
        gold_document_from_json(d)

    d = json.loads(json.dumps(GOLD))
    d['events'][0]['mentions'][0]['arguments'].append({'role': 'Target', 'entity_mention_id': 'm1',
                                                        'filler_id': 'f1'})
    with pytest.raises(ValueError):
        gold_document_from_json(d)


def test_parse_document_from_json():
    doc = parse_document_from_json(PARSE)
    assert doc.docid == DOCID
    assert len(doc.sentences) == 2
    assert doc.head_for(span(0, 12)) == span(4, 12)
    assert doc.head_for(span(35, 40)) is None


def test_prepare_documents(tmp_path):
    gold_file = write(tmp_path, 'gold.json', json.dumps(GOLD))
    response_file = write(tmp_path, 'responses.tsv', response_line() + '\n')
    parse_file = write(tmp_path, 'parse.json', json.dumps(PARSE))
    filelist = write(tmp_path, 'filelist', 'GOLD:{} RESPONSES:{} PARSE:{}\n\n'.format(gold_file, response_file,
                                                                                    parse_file))

    docs = prepare_documents(read_filelist(filelist))
    assert len(docs) == 1
    assert docs[0].docid == DOCID
    assert len(docs[0].responses) == 1
    assert docs[0].parse_document is not None


def test_prepare_documents_checks_docids(tmp_path):
    gold_file = write(tmp_path, 'gold.json', json.dumps(GOLD))
    response_file = write(tmp_path, 'responses.tsv', response_line(docid='OTHER') + '\n')
    with pytest.raises(ValueError):
        prepare_documents(['GOLD:{} RESPONSES:{}'.format(gold_file, response_file)])


def test_gold_document_missing_fields_are_located(tmp_path):
    d = json.loads(json.dumps(GOLD))
    del d['entities'][0]['mentions'][0]['start']
    with pytest.raises(ValueError) as e:
        gold_document_from_json(d)
    assert DOCID in str(e.value)

    d = json.loads(json.dumps(GOLD))
    del d['events'][0]['mentions'][0]['arguments'][0]['role']
    filepath = write(tmp_path, 'gold.json', json.dumps(d))
    with pytest.raises(ValueError) as e:
        read_gold_document(filepath)
    assert filepath in str(e.value)
    assert DOCID in str(e.value)


def test_parse_document_missing_fields_are_located(tmp_path):
    d = json.loads(json.dumps(PARSE))
    del d['sentences'][0]['tree']['children'][1]['tag']
    filepath = write(tmp_path, 'parse.json', json.dumps(d))
    with pytest.raises(ValueError) as e:
        read_parse_document(filepath)
    assert filepath in str(e.value)
    assert DOCID in str(e.value)

    with pytest.raises(ValueError):
        read_parse_document(write(tmp_path, 'truncated.json', '{"doc_id": '))
