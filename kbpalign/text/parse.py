import logging

from kbpalign.text.text_span import CharOffsetSpan


logger = logging.getLogger(__name__)


class ParseNode(object):
    """A constituent of a syntactic parse tree.

    A node without children is a terminal (a token). head_index picks out which child carries the head of this
    constituent; it is supplied by the parser, we never compute heads ourselves.
    """

    def __init__(self, tag, span, children=None, head_index=None):
        """
        :type tag: str
        :type span: kbpalign.text.text_span.CharOffsetSpan
        :type children: list[ParseNode]
        :type head_index: int
        """
        self.tag = tag
        self.span = span
        self.children = children if children is not None else []
        self.head_index = head_index

    def is_terminal(self):
        return len(self.children) == 0

    def head_child(self):
        if self.head_index is None or not (0 <= self.head_index < len(self.children)):
            return None
        return self.children[self.head_index]

    def terminal_head(self):
        """Follows head children down to a terminal. Returns None if some constituent on the way has no head.

        :rtype: ParseNode
        """
        node = self
        while not node.is_terminal():
            node = node.head_child()
            if node is None:
                return None
        return node

    def preorder(self):
        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))


class ParsedSentence(object):
    def __init__(self, span, root):
        """
        :type span: kbpalign.text.text_span.CharOffsetSpan
        :type root: ParseNode
        """
        self.span = span
        self.root = root

    def node_for_offsets(self, span):
        """The highest constituent whose offsets are exactly the given span, if any

        :type span: kbpalign.text.text_span.CharOffsetSpan
        :rtype: ParseNode
        """
        if self.root is None:
            return None
        for node in self.root.preorder():
            if node.span == span:
                return node
        return None


class ParseDocument(object):
    """An in-memory syntactic analysis of one document, queried for the heads of offset ranges"""

    def __init__(self, docid, sentences):
        """:type sentences: list[ParsedSentence]"""
        self.docid = docid
        self.sentences = sentences

    def first_sentence_containing(self, span):
        """:rtype: ParsedSentence"""
        for sentence in self.sentences:
            if sentence.span.encloses(span):
                return sentence
        return None

    def head_for(self, span):
        """Returns the span of the terminal head of the constituent exactly covering 'span', or None when there is
        no such sentence, constituent, or head.

        :type span: kbpalign.text.text_span.CharOffsetSpan
        :rtype: kbpalign.text.text_span.CharOffsetSpan
        """
        sentence = self.first_sentence_containing(span)
        if sentence is None:
            return None
        node = sentence.node_for_offsets(span)
        if node is None:
            return None
        terminal_head = node.terminal_head()
        if terminal_head is None:
            return None
        head_span = terminal_head.span
        return CharOffsetSpan(head_span.start_char_offset(), head_span.end_char_offset(), head_span.text)
