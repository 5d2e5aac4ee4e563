"""Tests for the global value synchronizer."""

import asyncio

import pytest

from perseform.core.errors import StoreError
from perseform.core.models import FormConfig, FormState, GlobalValue
from perseform.store import InMemoryValueStore, Namespace
from perseform.sync import GlobalValueSynchronizer


@pytest.fixture
def synchronizer(memory_store: InMemoryValueStore) -> GlobalValueSynchronizer:
    return GlobalValueSynchronizer(memory_store)


class TestReadWriteGlobal:
    """Tests for reading and writing global values."""

    def test_write_then_read(self, synchronizer: GlobalValueSynchronizer) -> None:
        """Test writing and reading a global value."""
        asyncio.run(synchronizer.write_global("country", "FR"))

        assert asyncio.run(synchronizer.read_global("country")) == "FR"
        assert asyncio.run(synchronizer.read_global_record("country")) == GlobalValue(id="country", value="FR")

    def test_read_unset_key(self, synchronizer: GlobalValueSynchronizer) -> None:
        """Test that an unset key reads as no value."""
        assert asyncio.run(synchronizer.read_global("unset")) is None
        assert asyncio.run(synchronizer.read_global_record("unset")) is None

    def test_read_empty_key(self, synchronizer: GlobalValueSynchronizer) -> None:
        """Test that an empty or missing key reads as no value."""
        assert asyncio.run(synchronizer.read_global("")) is None
        assert asyncio.run(synchronizer.read_global(None)) is None

    def test_stored_none_is_a_record(self, synchronizer: GlobalValueSynchronizer) -> None:
        """Test that a key set to None still has a record."""
        asyncio.run(synchronizer.write_global("g", None))

        assert asyncio.run(synchronizer.read_global_record("g")) == GlobalValue(id="g", value=None)


class TestEnsureGlobalDefaults:
    """Tests for seeding global values from config defaults."""

    def test_seeds_unset_keys(self, synchronizer: GlobalValueSynchronizer, profile_config: FormConfig) -> None:
        """Test that an unset key is seeded with the input default."""
        seeded = asyncio.run(synchronizer.ensure_global_defaults(profile_config))

        assert seeded == ["country"]
        assert asyncio.run(synchronizer.read_global("country")) == "FR"

    def test_first_write_wins(
        self,
        synchronizer: GlobalValueSynchronizer,
        profile_config: FormConfig,
        shipping_config: FormConfig,
    ) -> None:
        """Test that a later config does not overwrite an existing global."""
        asyncio.run(synchronizer.ensure_global_defaults(profile_config))
        seeded = asyncio.run(synchronizer.ensure_global_defaults(shipping_config))

        assert seeded == []
        assert asyncio.run(synchronizer.read_global("country")) == "FR"

    def test_existing_none_value_not_reseeded(self, synchronizer: GlobalValueSynchronizer) -> None:
        """Test that a key explicitly set to None counts as set."""
        asyncio.run(synchronizer.write_global("g", None))
        config = FormConfig.model_validate({"id": "f", "inputsConfig": {"a": {"globalKey": "g", "value": 5}}})

        asyncio.run(synchronizer.ensure_global_defaults(config))

        assert asyncio.run(synchronizer.read_global("g")) is None

    def test_local_inputs_ignored(self, synchronizer: GlobalValueSynchronizer, memory_store: InMemoryValueStore) -> None:
        """Test that inputs without a global key seed nothing."""
        config = FormConfig.model_validate({"id": "f", "inputsConfig": {"a": {"value": 1}}})

        assert asyncio.run(synchronizer.ensure_global_defaults(config)) == []
        assert memory_store.ids(Namespace.GLOBAL) == []


class TestPropagateFormToGlobals:
    """Tests for pushing form values into global values."""

    def test_propagates_global_inputs_only(
        self,
        synchronizer: GlobalValueSynchronizer,
        memory_store: InMemoryValueStore,
        profile_config: FormConfig,
    ) -> None:
        """Test that only global-scoped inputs are written."""
        state = FormState(id="profile", state={"country": "IT", "nickname": "bob"})

        written = asyncio.run(synchronizer.propagate_form_to_globals(state, profile_config))

        assert written == ["country"]
        assert asyncio.run(synchronizer.read_global("country")) == "IT"
        assert memory_store.ids(Namespace.GLOBAL) == ["country"]

    def test_falsy_values_propagate(self, synchronizer: GlobalValueSynchronizer, profile_config: FormConfig) -> None:
        """Test that falsy form values are written like any other."""
        asyncio.run(synchronizer.write_global("country", "FR"))
        state = FormState(id="profile", state={"country": ""})

        asyncio.run(synchronizer.propagate_form_to_globals(state, profile_config))

        assert asyncio.run(synchronizer.read_global("country")) == ""

    def test_undeclared_inputs_ignored(self, synchronizer: GlobalValueSynchronizer, profile_config: FormConfig) -> None:
        """Test that state keys absent from the config are skipped."""
        state = FormState(id="profile", state={"extra": 1})

        assert asyncio.run(synchronizer.propagate_form_to_globals(state, profile_config)) == []

    def test_missing_config_propagates_nothing(self, synchronizer: GlobalValueSynchronizer) -> None:
        """Test that a state without config writes no globals."""
        state = FormState(id="orphan", state={"country": "IT"})

        assert asyncio.run(synchronizer.propagate_form_to_globals(state, None)) == []

    def test_partial_failure_keeps_earlier_writes(self, failing_global_store) -> None:
        """Test that keys written before a failure stay written."""
        store = failing_global_store({"g2"})
        synchronizer = GlobalValueSynchronizer(store)
        config = FormConfig.model_validate(
            {
                "id": "f",
                "inputsConfig": {
                    "a": {"globalKey": "g1"},
                    "b": {"globalKey": "g2"},
                    "c": {"globalKey": "g3"},
                },
            }
        )
        state = FormState(id="f", state={"a": 1, "b": 2, "c": 3})

        with pytest.raises(StoreError, match="disk full"):
            asyncio.run(synchronizer.propagate_form_to_globals(state, config))

        assert asyncio.run(synchronizer.read_global("g1")) == 1
        assert asyncio.run(synchronizer.read_global("g2")) is None
        assert asyncio.run(synchronizer.read_global("g3")) is None
