import json

import pytest

from kbpalign.ontology import RoleMapper


def test_flat_role_map():
    mapper = RoleMapper.from_json({'attacker': 'Attacker', 'place': 'Place'})
    assert mapper.map_role('attacker') == 'Attacker'
    assert mapper.map_role('attacker', 'Conflict.Attack') == 'Attacker'
    assert mapper.map_role('victim') is None
    assert mapper.known_gold_roles() == {'attacker', 'place'}


def test_role_map_by_event_type_falls_back_to_default():
    mapper = RoleMapper.from_json({
        'default': {'place': 'Place', 'entity': 'Entity'},
        'by_event_type': {'Contact.Meet': {'entity': 'Participant'}},
    })
    assert mapper.map_role('entity', 'Contact.Meet') == 'Participant'
    assert mapper.map_role('entity', 'Conflict.Attack') == 'Entity'
    assert mapper.map_role('place', 'Contact.Meet') == 'Place'
    assert mapper.map_role('entity') == 'Entity'


def test_role_map_validation():
    with pytest.raises(ValueError):
        RoleMapper.from_json({'default': {}, 'roles': {}})
    with pytest.raises(ValueError):
        RoleMapper.from_json({'attacker': ['Attacker']})


def test_identity():
    mapper = RoleMapper.identity(['Agent', 'Time'])
    assert mapper.map_role('Agent') == 'Agent'
    assert mapper.map_role('agent') is None


def test_from_file(tmp_path):
    filepath = tmp_path / 'roles.json'
    filepath.write_text(json.dumps({'target': 'Target'}), encoding='utf-8')
    assert RoleMapper.from_file(str(filepath)).map_role('target') == 'Target'
