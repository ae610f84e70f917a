from policypulse.backends import MemoryBackend
from policypulse.runtime import INDEX_KEY, IndexManager, encode_index


def test_empty_backend_has_empty_index(backend):
    assert IndexManager(backend).read_index() == []


def test_corrupted_index_reads_as_empty(backend):
    backend.set_data(INDEX_KEY, b"{broken")
    assert IndexManager(backend).read_index() == []


def test_append_keeps_order(backend):
    idx = IndexManager(backend)
    idx.append_key("a")
    idx.append_key("b")
    idx.append_key("c")
    assert idx.read_index() == ["a", "b", "c"]


def test_append_is_idempotent(backend):
    idx = IndexManager(backend)
    idx.append_key("k")
    idx.append_key("k")
    assert idx.read_index() == ["k"]


def test_append_over_corrupted_index_starts_fresh(backend):
    backend.set_data(INDEX_KEY, b"garbage")
    IndexManager(backend).append_key("k")
    assert IndexManager(backend).read_index() == ["k"]


def test_concurrent_appenders_last_writer_wins():
    backend = MemoryBackend({INDEX_KEY: encode_index(["a"])})

    class Interleaving(MemoryBackend):
        """Lets another client append right after our read of the index."""

        def __init__(self, inner):
            super().__init__()
            self._data = inner._data
            self.fired = False

        def get_data(self, key):
            data = super().get_data(key)
            if key == INDEX_KEY and not self.fired:
                self.fired = True
                IndexManager(backend).append_key("from-client-2")
            return data

    IndexManager(Interleaving(backend)).append_key("from-client-1")
    assert IndexManager(backend).read_index() == ["a", "from-client-1"]
