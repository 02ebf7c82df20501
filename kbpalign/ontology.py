import json
import logging


logger = logging.getLogger(__name__)


class RoleMapper(object):
    """Translates gold-ontology argument roles into the role vocabulary of system responses.

    This is a partial mapping: a gold role with no entry has no equivalent, and map_role returns None for it.
    Tables may be given per event type; a gold role is first looked up in the table of the response's event type
    and then in the default table.
    """

    def __init__(self, default_roles=None, roles_by_event_type=None):
        """
        :type default_roles: dict[str, str]
        :type roles_by_event_type: dict[str, dict[str, str]]
        """
        self.default_roles = dict(default_roles) if default_roles is not None else dict()
        self.roles_by_event_type = dict()
        if roles_by_event_type is not None:
            for event_type, roles in roles_by_event_type.items():
                self.roles_by_event_type[event_type] = dict(roles)

    @classmethod
    def identity(cls, roles):
        """A mapper under which each of the given roles maps to itself"""
        return cls(dict((role, role) for role in roles))

    def map_role(self, gold_role, event_type=None):
        """
        :type gold_role: str
        :type event_type: str
        :rtype: str
        """
        if event_type is not None and event_type in self.roles_by_event_type:
            roles = self.roles_by_event_type[event_type]
            if gold_role in roles:
                return roles[gold_role]
        return self.default_roles.get(gold_role)

    def known_gold_roles(self):
        ret = set(self.default_roles.keys())
        for roles in self.roles_by_event_type.values():
            ret.update(roles.keys())
        return ret

    @classmethod
    def from_json(cls, d):
        """Accepts either a flat {gold_role: response_role} dict, or {"default": {...}, "by_event_type": {...}}"""
        if 'default' in d or 'by_event_type' in d:
            unexpected = set(d.keys()) - {'default', 'by_event_type'}
            if len(unexpected) > 0:
                raise ValueError('Unexpected keys in role map: {}'.format(','.join(sorted(unexpected))))
            return cls(d.get('default'), d.get('by_event_type'))
        for gold_role, response_role in d.items():
            if not isinstance(response_role, str):
                raise ValueError('Role map entry for "{}" must be a string, got {}'.format(gold_role, response_role))
        return cls(d)

    @classmethod
    def from_file(cls, filepath):
        with open(filepath, 'r', encoding='utf-8') as f:
            mapper = cls.from_json(json.load(f))
        logger.info('Loaded role map from {} covering {} gold roles'.format(filepath, len(mapper.known_gold_roles())))
        return mapper
