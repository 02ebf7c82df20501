import logging

import numpy as np

from kbpalign.common.utils import F1Score

logger = logging.getLogger(__name__)


class AlignmentSummary(object):
    """Counts of how responses were aligned, overall and per alignment rule.

    strategy_counts[i] is the number of responses aligned by the i-th rule; unmatched responses are not counted there.
    """

    def __init__(self, strategy_names, strategy_counts, num_unmatched, num_ambiguous, score):
        """
        :type strategy_names: list[str]
        :type strategy_counts: numpy.ndarray
        :type score: kbpalign.common.utils.F1Score
        """
        self.strategy_names = strategy_names
        self.strategy_counts = strategy_counts
        self.num_unmatched = num_unmatched
        self.num_ambiguous = num_ambiguous
        self.score = score

    def count_for(self, strategy_name):
        return int(self.strategy_counts[self.strategy_names.index(strategy_name)])

    def to_string(self):
        lines = ['Alignment: ' + self.score.to_string()]
        for name, count in zip(self.strategy_names, self.strategy_counts):
            if count > 0:
                lines.append('{}\t{}'.format(name, count))
        lines.append('unmatched\t{}'.format(self.num_unmatched))
        lines.append('ambiguous\t{}'.format(self.num_ambiguous))
        return '\n'.join(lines)

    def to_json(self):
        d = dict()
        d['score'] = self.score.to_json()
        d['strategy_counts'] = dict((name, int(count)) for name, count in zip(self.strategy_names,
                                                                               self.strategy_counts))
        d['unmatched'] = int(self.num_unmatched)
        d['ambiguous'] = int(self.num_ambiguous)
        return d


def summarize_alignments(strategy_names, results, gold_documents):
    """Tabulates alignment results across documents.

    The overall score treats alignment as retrieval of gold scoring ids (entities, or fillers): #C is the number of
    distinct (docid, scoring id) pairs some response aligned to, #R the number of distinct such pairs among the gold
    arguments, and #P the number of responses.

    :type strategy_names: list[str]
    :type results: list[kbpalign.alignment.aligner.AlignmentResult]
    :type gold_documents: list[kbpalign.text.text_theory.GoldDocument]
    :rtype: AlignmentSummary
    """
    strategy_indices = np.asarray([r.strategy_index for r in results if r.is_matched()], dtype=np.int64)
    strategy_counts = np.bincount(strategy_indices, minlength=len(strategy_names))
    matched = np.asarray([r.is_matched() for r in results], dtype=bool)
    ambiguous = np.asarray([r.ambiguous for r in results], dtype=bool)
    num_unmatched = int(np.sum(~matched))
    num_ambiguous = int(np.sum(ambiguous))

    gold_ids = set()
    for doc in gold_documents:
        for scoring_id in doc.scoring_ids():
            gold_ids.add((doc.docid, scoring_id))

    found_ids = set()
    for r in results:
        if r.is_matched():
            found_ids.add((r.response.docid, r.scoring_id()))

    score = F1Score(len(found_ids & gold_ids), len(gold_ids), len(results), class_label='all')

    logger.info('Aligned {} of {} responses, {} ambiguously'.format(int(np.sum(matched)), len(results),
                                                                     num_ambiguous))
    return AlignmentSummary(list(strategy_names), strategy_counts, num_unmatched, num_ambiguous, score)
