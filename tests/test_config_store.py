import pytest

from codeassist.db.init_db import init_db
from codeassist.db.session import create_memory_engine
from codeassist.models.enums import FineTuningMethod
from codeassist.services.config_seed import PRESET_MODEL_CONFIGS, seed_model_configs
from codeassist.services.config_store import ConfigStore


def _fields(name: str, active: bool = False) -> dict:
    return {
        'model_name': name,
        'base_model': name.lower(),
        'fine_tuning_method': FineTuningMethod.QLORA,
        'deployment_platform': 'huggingface',
        'parameters': {'temperature': 0.7},
        'is_active': active,
    }


@pytest.fixture
def store() -> ConfigStore:
    engine = create_memory_engine()
    init_db(engine)
    return ConfigStore(engine)


def _active_ids(store: ConfigStore) -> list[int]:
    return [record.id for record in store.list_configs() if record.is_active]


def test_create_assigns_sequential_ids_and_defaults_inactive(store):
    first = store.create_config(_fields('A'))
    second = store.create_config({key: value for key, value in _fields('B').items() if key != 'is_active'})
    assert second.id == first.id + 1
    assert second.is_active is False
    assert store.get_active_config() is None


def test_creating_active_config_deactivates_others(store):
    store.create_config(_fields('A', active=True))
    second = store.create_config(_fields('B', active=True))
    assert _active_ids(store) == [second.id]


@pytest.mark.parametrize('count', [1, 3, 6])
def test_activating_any_config_leaves_exactly_one_active(store, count):
    records = [store.create_config(_fields(f'M{index}', active=index == 0)) for index in range(count)]
    for record in reversed(records):
        activated = store.set_active_config(record.id)
        assert activated is not None and activated.is_active
        assert _active_ids(store) == [record.id]
        assert store.get_active_config().id == record.id


def test_update_merges_fields(store):
    record = store.create_config(_fields('A'))
    updated = store.update_config(record.id, {'model_name': 'Renamed', 'parameters': {'maxLength': 256}})
    assert updated.model_name == 'Renamed'
    assert updated.base_model == 'a'
    assert updated.parameters == {'maxLength': 256}


def test_update_to_active_deactivates_others(store):
    first = store.create_config(_fields('A', active=True))
    second = store.create_config(_fields('B'))
    store.update_config(second.id, {'is_active': True})
    assert _active_ids(store) == [second.id]
    assert store.get_config(first.id).is_active is False


def test_deactivating_leaves_no_active_config(store):
    record = store.create_config(_fields('A', active=True))
    store.update_config(record.id, {'is_active': False})
    assert store.get_active_config() is None


def test_unknown_ids_return_none(store):
    assert store.update_config(999, {'model_name': 'x'}) is None
    assert store.set_active_config(999) is None


def test_delete_config_is_idempotent(store):
    record = store.create_config(_fields('A'))
    store.delete_config(record.id)
    store.delete_config(record.id)
    assert store.list_configs() == []


def test_seed_creates_presets_once(store):
    assert seed_model_configs(store) == len(PRESET_MODEL_CONFIGS)
    assert seed_model_configs(store) == 0
    configs = store.list_configs()
    assert [record.model_name for record in configs][0] == 'Code Llama 7B'
    assert store.get_active_config().model_name == 'Code Llama 7B'
    assert configs[1].parameters == {'temperature': 0.7, 'maxLength': 512}
