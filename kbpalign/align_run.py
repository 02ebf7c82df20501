import argparse
import codecs
import json
import logging

from kbpalign.alignment.aligner import EREAligner
from kbpalign.alignment.strategy import create_response_matching_strategy
from kbpalign.annotation.ingestion import prepare_documents
from kbpalign.annotation.ingestion import read_filelist
from kbpalign.common.scoring import summarize_alignments
from kbpalign.ontology import RoleMapper

logger = logging.getLogger(__name__)


def align_documents(params, role_mapper, docs):
    """
    :type params: dict
    :type role_mapper: kbpalign.ontology.RoleMapper
    :type docs: list[kbpalign.annotation.ingestion.DocumentInput]
    :rtype: list[kbpalign.alignment.aligner.AlignmentResult]
    """
    relax_using_parse = params.get('relax_using_parse', True)

    results = []
    for doc in docs:
        relax = relax_using_parse and doc.parse_document is not None
        if relax_using_parse and doc.parse_document is None:
            logger.info('No parse for {}, aligning without head relaxation'.format(doc.docid))
        aligner = EREAligner.create(doc.gold_document, role_mapper, doc.parse_document, relax_using_parse=relax)
        doc_results = aligner.align_all(doc.responses)
        num_matched = sum(1 for r in doc_results if r.is_matched())
        logger.info('{}: aligned {} of {} responses'.format(doc.docid, num_matched, len(doc_results)))
        results.extend(doc_results)
    return results


def run(params):
    """Reads the documents named in params['filelist'], aligns every response, and writes the requested outputs.

    :type params: dict
    :rtype: kbpalign.common.scoring.AlignmentSummary
    """
    if 'filelist' not in params:
        raise ValueError('params must give a filelist')
    if 'role_map' not in params:
        raise ValueError('params must give a role_map')

    role_mapper = RoleMapper.from_file(params['role_map'])
    docs = prepare_documents(read_filelist(params['filelist']))

    results = align_documents(params, role_mapper, docs)
    strategy_names = [strategy.name for strategy in create_response_matching_strategy(role_mapper)]
    summary = summarize_alignments(strategy_names, results, [doc.gold_document for doc in docs])
    print(summary.to_string())

    output_params = params.get('output', dict())
    if output_params.get('alignment_file') is not None:
        with codecs.open(output_params['alignment_file'], 'w', encoding='utf-8') as fp:
            json.dump([r.to_json() for r in results], fp, indent=4, sort_keys=True, ensure_ascii=False)
    if output_params.get('score_file') is not None:
        with codecs.open(output_params['score_file'], 'w', encoding='utf-8') as fp:
            json.dump(summary.to_json(), fp, indent=4, sort_keys=True, ensure_ascii=False)

    return summary


if __name__ == "__main__":
    logging.basicConfig(format='%(asctime)s %(name)-12s %(levelname)-8s %(message)s', level=logging.INFO)

    # ==== command line arguments, and loading of input parameter files ====
    parser = argparse.ArgumentParser()
    parser.add_argument('--params', required=True)

    args = parser.parse_args()

    with open(args.params) as f:
        params = json.load(f)
    print(json.dumps(params, sort_keys=True, indent=4))

    run(params)
