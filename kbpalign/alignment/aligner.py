import logging

from kbpalign.alignment.strategy import create_response_matching_strategy


logger = logging.getLogger(__name__)


class AlignmentResult(object):
    """The outcome of aligning one response.

    argument: the chosen gold argument, or None when nothing matched
    strategy_name, strategy_index: the rule which produced the match
    candidate_ids: mention ids of every gold argument the winning rule accepted, in corpus order
    ambiguous: True when the winning rule accepted more than one gold argument
    """

    def __init__(self, response, argument=None, strategy_name=None, strategy_index=None, candidate_ids=()):
        self.response = response
        self.argument = argument
        self.strategy_name = strategy_name
        self.strategy_index = strategy_index
        self.candidate_ids = tuple(candidate_ids)

    @classmethod
    def unmatched(cls, response):
        return cls(response)

    def is_matched(self):
        return self.argument is not None

    @property
    def ambiguous(self):
        return len(self.candidate_ids) > 1

    def mention_id(self):
        if self.argument is None:
            return None
        return self.argument.mention_id()

    def scoring_id(self):
        if self.argument is None:
            return None
        return self.argument.scoring_id()

    def __eq__(self, other):
        if not isinstance(other, AlignmentResult):
            return False
        return (self.response == other.response and self.mention_id() == other.mention_id()
                and self.strategy_name == other.strategy_name and self.candidate_ids == other.candidate_ids)

    def __hash__(self):
        return hash((self.response, self.mention_id(), self.strategy_name, self.candidate_ids))

    def to_string(self):
        if not self.is_matched():
            return '{} UNMATCHED'.format(self.response.response_id)
        return '{} -> {} via {}{}'.format(self.response.response_id, self.mention_id(), self.strategy_name,
                                          ' (ambiguous: {})'.format(','.join(str(i) for i in self.candidate_ids))
                                          if self.ambiguous else '')

    def to_json(self):
        d = dict()
        d['response_id'] = self.response.response_id
        d['docid'] = self.response.docid
        d['event_type'] = self.response.event_type
        d['role'] = self.response.role
        d['cas'] = self.response.canonical_argument.string
        d['matched'] = self.is_matched()
        d['mention_id'] = self.mention_id()
        d['scoring_id'] = self.scoring_id()
        d['strategy'] = self.strategy_name
        d['ambiguous'] = self.ambiguous
        d['candidate_ids'] = list(self.candidate_ids)
        return d


class EREAligner(object):
    """Aligns system responses to the gold arguments of one document by offset matching.

    Offset matching is relaxed in two ways: by fuzzier matching (heads instead of extents, containment instead of
    equality), and by finding the syntactic head of the response span when a parse is available. The rules are
    tried strictest first and the first rule which accepts any gold argument decides the alignment.

    The aligner holds no mutable state, so align may be called concurrently.
    """

    def __init__(self, gold_document, strategies):
        """
        :type gold_document: kbpalign.text.text_theory.GoldDocument
        :type strategies: tuple[kbpalign.alignment.strategy.Strategy]
        """
        self.gold_document = gold_document
        self.strategies = tuple(strategies)
        self._arguments = tuple(gold_document.arguments())

    @classmethod
    def create(cls, gold_document, role_mapper, parse_document=None, relax_using_parse=False):
        """
        :type gold_document: kbpalign.text.text_theory.GoldDocument
        :type role_mapper: kbpalign.ontology.RoleMapper
        :param parse_document: object with head_for(span); required when relax_using_parse is set
        :type relax_using_parse: bool
        """
        if relax_using_parse and parse_document is None:
            raise ValueError('Cannot relax alignment using parses for document {} without a parse'.format(
                gold_document.docid))
        strategies = create_response_matching_strategy(role_mapper,
                                                       parse_document if relax_using_parse else None)
        return cls(gold_document, strategies)

    def align(self, response):
        """
        :type response: kbpalign.text.text_span.Response
        :rtype: AlignmentResult
        """
        if response.docid != self.gold_document.docid:
            raise ValueError('Response {} is for document {} but the aligner holds document {}'.format(
                response.response_id, response.docid, self.gold_document.docid))

        for index, strategy in enumerate(self.strategies):
            matches = [argument for argument in self._arguments if strategy.checker.aligns(response, argument)]
            if len(matches) == 0:
                continue

            # one mention filling several event mentions' slots is still a single candidate
            candidate_ids = []
            for argument in matches:
                if argument.mention_id() not in candidate_ids:
                    candidate_ids.append(argument.mention_id())
            if len(candidate_ids) > 1:
                logger.warning('Multiple matches for response {} under {}: {}'.format(
                    response.response_id, strategy.name, ', '.join(str(i) for i in candidate_ids)))
            else:
                logger.debug('Response {} aligned to {} under {}'.format(
                    response.response_id, candidate_ids[0], strategy.name))
            return AlignmentResult(response, matches[0], strategy.name, index, candidate_ids)

        logger.debug('No alignment for response {}'.format(response.response_id))
        return AlignmentResult.unmatched(response)

    def align_all(self, responses):
        """:rtype: list[AlignmentResult]"""
        return [self.align(response) for response in responses]
