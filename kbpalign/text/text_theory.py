import logging


logger = logging.getLogger(__name__)


class Entity(object):
    """A coreference chain of gold entity mentions"""

    def __init__(self, id, mentions=None):
        """:type mentions: list[kbpalign.text.text_span.EntityMention]"""
        self.id = id
        self.mentions = mentions if mentions is not None else []

    def add_mention(self, mention):
        self.mentions.append(mention)


class EventMention(object):
    """A single annotated occurrence of an event, together with its arguments in annotation order"""

    def __init__(self, id, event_type, arguments=None):
        """:type arguments: list[kbpalign.text.text_span.EventArgument]"""
        self.id = id
        self.event_type = event_type
        self.arguments = arguments if arguments is not None else []

    def add_argument(self, argument):
        self.arguments.append(argument)


class Event(object):
    def __init__(self, id, event_mentions=None):
        """:type event_mentions: list[EventMention]"""
        self.id = id
        self.event_mentions = event_mentions if event_mentions is not None else []

    def add_event_mention(self, event_mention):
        self.event_mentions.append(event_mention)


class GoldDocument(object):
    """The gold annotation for one document.

    The order in which entities, fillers, events, event mentions and arguments were added is the corpus order.
    arguments() walks events, then their mentions, then their arguments in that order, and the aligner relies on it
    to break ties between equally good matches.
    """

    def __init__(self, docid):
        self.docid = docid
        self.entities = []
        """:type: list[Entity]"""
        self.fillers = []
        """:type: list[kbpalign.text.text_span.Filler]"""
        self.events = []
        """:type: list[Event]"""

    def add_entity(self, entity):
        self.entities.append(entity)

    def add_filler(self, filler):
        self.fillers.append(filler)

    def add_event(self, event):
        self.events.append(event)

    def entity_mentions(self):
        """:rtype: list[kbpalign.text.text_span.EntityMention]"""
        ret = []
        for entity in self.entities:
            ret.extend(entity.mentions)
        return ret

    def arguments(self):
        """Every gold event argument of the document, in corpus order

        :rtype: list[kbpalign.text.text_span.EventArgument]
        """
        ret = []
        for event in self.events:
            for event_mention in event.event_mentions:
                ret.extend(event_mention.arguments)
        return ret

    def scoring_ids(self):
        """The distinct scoring ids over all gold arguments, in corpus order of first appearance"""
        ret = []
        seen = set()
        for argument in self.arguments():
            scoring_id = argument.scoring_id()
            if scoring_id not in seen:
                seen.add(scoring_id)
                ret.append(scoring_id)
        return ret
