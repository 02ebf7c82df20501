"""Head lookup over SERIF XML parses.

SERIF token offsets are EDT offsets with an inclusive end, which is the same convention as CharOffsetSpan, so no
+1 adjustment is needed here.
"""
import logging

from kbpalign.text.text_span import CharOffsetSpan


logger = logging.getLogger(__name__)


def syn_node_span(syn_node):
    """:type syn_node: serifxml3.SynNode"""
    return CharOffsetSpan(syn_node.start_token.start_edt, syn_node.end_token.end_edt, syn_node.text)


def syn_node_for_offsets(root, span):
    """The highest SynNode whose EDT offsets are exactly the given span

    :type root: serifxml3.SynNode
    :type span: kbpalign.text.text_span.CharOffsetSpan
    """
    stack = [root]
    while stack:
        node = stack.pop()
        if syn_node_span(node) == span:
            return node
        stack.extend(reversed(list(node)))
    return None


def terminal_head(syn_node):
    """Follows the parser's head pointers down to a terminal

    :type syn_node: serifxml3.SynNode
    """
    node = syn_node
    while len(node) > 0:
        node = node.head
        if node is None:
            return None
    return node


class SerifHeadLookup(object):
    """Answers head_for(span) from the parse trees of a SERIF document"""

    def __init__(self, serif_doc):
        """:type serif_doc: serifxml3.Document"""
        self.docid = serif_doc.docid
        self.sentence_roots = []
        for sentence in serif_doc.sentences:
            st = sentence.sentence_theories[0]
            """:type: serifxml3.SentenceTheory"""
            if st.parse is None or st.parse.root is None or len(st.token_sequence) == 0:
                continue
            sentence_span = CharOffsetSpan(st.token_sequence[0].start_edt, st.token_sequence[-1].end_edt)
            self.sentence_roots.append((sentence_span, st.parse.root))

    def head_for(self, span):
        """
        :type span: kbpalign.text.text_span.CharOffsetSpan
        :rtype: kbpalign.text.text_span.CharOffsetSpan
        """
        for sentence_span, root in self.sentence_roots:
            if sentence_span.encloses(span):
                node = syn_node_for_offsets(root, span)
                if node is None:
                    return None
                head = terminal_head(node)
                if head is None:
                    return None
                return syn_node_span(head)
        return None


def read_serif_head_lookup(filepath):
    import serifxml3

    serif_doc = serifxml3.Document(filepath)
    lookup = SerifHeadLookup(serif_doc)
    logger.info('Read {} parsed sentences for {} from {}'.format(len(lookup.sentence_roots), lookup.docid, filepath))
    return lookup
