from abc import ABCMeta, abstractmethod

import logging


logger = logging.getLogger(__name__)


class MentionResponseChecker(metaclass=ABCMeta):
    """Decides whether a response and a gold argument are compatible. Checkers are stateless and side-effect free."""

    @abstractmethod
    def aligns(self, response, argument):
        """
        :type response: kbpalign.text.text_span.Response
        :type argument: kbpalign.text.text_span.EventArgument
        :rtype: bool
        """
        pass


class ExactSpanChecker(MentionResponseChecker):
    def __init__(self, response_span_extractor, argument_span_extractor):
        self.response_span_extractor = response_span_extractor
        self.argument_span_extractor = argument_span_extractor

    def aligns(self, response, argument):
        return self.response_span_extractor(response) == self.argument_span_extractor(argument)


class ContainmentSpanChecker(MentionResponseChecker):
    """One extent must enclose the other, and the enclosing extent must hold both heads.

    When the gold extent encloses the response, the gold head must also lie within the response extent, so that a
    long gold extent does not swallow a response whose head is a different phrase from the gold head. A gold head
    equal to its whole extent (fillers, unheaded mentions) carries no head information and constrains nothing.
    """

    def __init__(self, response_span_extractor, response_head_extractor, argument_span_extractor,
                 argument_head_extractor):
        self.response_span_extractor = response_span_extractor
        self.response_head_extractor = response_head_extractor
        self.argument_span_extractor = argument_span_extractor
        self.argument_head_extractor = argument_head_extractor

    def aligns(self, response, argument):
        response_offsets = self.response_span_extractor(response)
        response_head = self.response_head_extractor(response)
        argument_offsets = self.argument_span_extractor(argument)
        argument_head = self.argument_head_extractor(argument)

        if response_offsets.encloses(argument_offsets):
            if response_offsets.encloses(response_head) and response_offsets.encloses(argument_head):
                return True
        if argument_offsets.encloses(response_offsets):
            if argument_offsets.encloses(response_head) and \
                    (argument_head == argument_offsets or response_offsets.encloses(argument_head)):
                return True
        return False


class MappedRolesMatch(MentionResponseChecker):
    """The gold role, mapped into the response vocabulary, must be exactly the response's role"""

    def __init__(self, role_mapper):
        """:type role_mapper: kbpalign.ontology.RoleMapper"""
        self.role_mapper = role_mapper

    def aligns(self, response, argument):
        role = self.role_mapper.map_role(argument.role, response.event_type)
        return role is not None and role == response.role


class And(MentionResponseChecker):
    """Both checkers must hold; first is always evaluated before second"""

    def __init__(self, first, second):
        self.first = first
        self.second = second

    def aligns(self, response, argument):
        return self.first.aligns(response, argument) and self.second.aligns(response, argument)
