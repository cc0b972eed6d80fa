import pytest

from thetasketch.hash_table import (
    MAX_THETA,
    MIN_LG_K,
    ResizeFactor,
    ThetaHashTable,
    starting_sub_multiple,
    starting_theta_from_sampling_probability,
)

SEED = 9001


def _populate(table, values):
    inserted = 0
    for i in values:
        hashed = table.hash_and_screen(f"value_{i}")
        if hashed != 0 and table.try_insert(hashed):
            inserted += 1
    return inserted


def test_new_hash_table():
    table = ThetaHashTable(8, ResizeFactor.X8, 1.0, SEED)
    assert table._lg_cur_size == starting_sub_multiple(9, MIN_LG_K, ResizeFactor.X8.lg_value())
    assert table.theta() == starting_theta_from_sampling_probability(1.0)
    assert table.theta() == MAX_THETA
    assert table.num_entries() == 0
    assert table.is_empty()
    assert list(table) == []
    assert table.lg_nom_size() == 8


def test_resize_factor_sets_initial_table_size():
    factors = list(ResizeFactor)
    assert [f.lg_value() for f in factors] == [0, 1, 2, 3]
    sizes = [len(ThetaHashTable(8, f, 1.0, SEED)._entries) for f in factors]
    assert sizes == [512, 32, 32, 64]


def test_starting_sub_multiple():
    assert starting_sub_multiple(9, 5, 3) == 6
    assert starting_sub_multiple(4, 5, 3) == 5
    assert starting_sub_multiple(9, 5, 0) == 9
    assert starting_sub_multiple(9, 5, 1) == 5


def test_starting_theta():
    assert starting_theta_from_sampling_probability(1.0) == MAX_THETA
    assert starting_theta_from_sampling_probability(0.5) == int(float(MAX_THETA) * 0.5)
    assert starting_theta_from_sampling_probability(0.0) == 0


def test_hash_and_screen():
    table = ThetaHashTable(8, ResizeFactor.X8, 1.0, SEED)
    hash1 = table.hash_and_screen("test1")
    hash2 = table.hash_and_screen("test2")
    assert hash1 != 0
    assert hash2 != 0
    assert hash1 != hash2
    assert hash1 < MAX_THETA

    zero_theta = ThetaHashTable(8, ResizeFactor.X8, 0.0, SEED)
    assert zero_theta.theta() == 0
    assert zero_theta.hash_and_screen("test3") == 0


def test_try_insert():
    table = ThetaHashTable(5, ResizeFactor.X8, 1.0, SEED)
    hashed = table.hash_and_screen("test_value")
    assert hashed != 0
    assert table.try_insert(hashed)
    assert table.num_entries() == 1
    assert not table.is_empty()

    assert not table.try_insert(hashed)
    assert table.num_entries() == 1

    assert not table.try_insert(0)
    assert table.num_entries() == 1


def test_insert_multiple_values():
    table = ThetaHashTable(8, ResizeFactor.X8, 1.0, SEED)
    inserted = _populate(table, range(10))
    assert table.num_entries() == inserted
    assert not table.is_empty()
    assert len(list(table)) == inserted


@pytest.mark.parametrize(
    "factor, expected_size", [(ResizeFactor.X2, 64), (ResizeFactor.X4, 128)]
)
def test_resize(factor, expected_size):
    table = ThetaHashTable(8, factor, 1.0, SEED)
    assert len(table._entries) == 32
    inserted = _populate(table, range(20))
    assert table.num_entries() > 0
    assert table.num_entries() == inserted
    assert len(table._entries) == expected_size


def test_rebuild():
    table = ThetaHashTable(5, ResizeFactor.X8, 1.0, SEED)
    assert table._lg_cur_size == 6
    assert len(table._entries) == 64
    assert table.theta() == MAX_THETA

    _populate(table, range(100))
    new_theta = table.theta()
    assert new_theta < MAX_THETA

    _populate(table, range(100, 200))
    assert table._lg_cur_size == 6
    assert len(table._entries) >= 64
    assert table.theta() < new_theta


def test_trim():
    table = ThetaHashTable(5, ResizeFactor.X8, 1.0, SEED)
    _populate(table, range(100))
    assert table.num_entries() > 32
    table.trim()
    assert table.num_entries() <= 32
    assert table.theta() < MAX_THETA
    assert all(entry < table.theta() for entry in table)


def test_trim_when_not_needed():
    table = ThetaHashTable(8, ResizeFactor.X8, 1.0, SEED)
    _populate(table, range(10))
    before_entries = table.num_entries()
    before_theta = table.theta()
    table.trim()
    assert table.num_entries() == before_entries
    assert table.theta() == before_theta


def test_reset():
    table = ThetaHashTable(8, ResizeFactor.X8, 1.0, SEED)
    init_theta = table.theta()
    init_lg_cur = table._lg_cur_size
    init_size = len(table._entries)

    _populate(table, range(10))
    assert not table.is_empty()
    assert table.num_entries() > 0

    table.reset()
    assert table.is_empty()
    assert table.num_entries() == 0
    assert table.theta() == init_theta
    assert table._lg_cur_size == init_lg_cur
    assert len(table._entries) == init_size
    assert list(table) == []


def test_reset_after_rebuild_restores_size():
    table = ThetaHashTable(5, ResizeFactor.X2, 1.0, SEED)
    init_size = len(table._entries)
    _populate(table, range(200))
    table.reset()
    assert len(table._entries) == init_size
    assert table.theta() == MAX_THETA


def test_table_with_sampling():
    table = ThetaHashTable(8, ResizeFactor.X8, 0.5, SEED)
    assert table.theta() == int(float(MAX_THETA) * 0.5)
    _populate(table, range(10))
    assert all(entry < table.theta() for entry in table)
    table.reset()
    assert table.theta() == int(float(MAX_THETA) * 0.5)
    assert table.is_empty()


def test_iterator():
    table = ThetaHashTable(8, ResizeFactor.X8, 1.0, SEED)
    inserted = []
    for i in range(10):
        hashed = table.hash_and_screen(f"value_{i}")
        if hashed != 0 and table.try_insert(hashed):
            inserted.append(hashed)
    iterated = list(table)
    assert len(iterated) == table.num_entries()
    assert len(iterated) == len(inserted)
    assert set(iterated) == set(inserted)
    assert 0 not in iterated


def test_empty_table_operations():
    table = ThetaHashTable(8, ResizeFactor.X8, 1.0, SEED)
    assert table.is_empty()
    assert table.num_entries() == 0
    assert list(table) == []
    table.trim()
    assert table.is_empty()
    table.reset()
    assert table.is_empty()


def test_rebuild_preserves_entries_less_than_kth():
    table = ThetaHashTable(5, ResizeFactor.X8, 1.0, SEED)
    k = 1 << 5
    i = 0
    inserted = []

    def insert_next():
        nonlocal i
        hashed = table.hash_and_screen(f"value_{i}")
        i += 1
        if hashed != 0:
            table.try_insert(hashed)
            inserted.append(hashed)
            return True
        return False

    while table.num_entries() < k:
        insert_next()

    threshold = table._capacity()
    while table.num_entries() < threshold:
        insert_next()

    while not insert_next():
        pass

    inserted.sort()
    kth = inserted[k]
    assert all(entry < kth for entry in table)
    assert table.theta() == kth
    assert table.num_entries() == k