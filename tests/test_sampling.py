import pytest

from response_router import config
from response_router.sampling import FirstPicker, RandomPicker, default_picker


def test_first_picker():
    assert FirstPicker().pick(["a", "b"]) == "a"
    assert FirstPicker().pick(("x",)) == "x"


def test_random_picker_seeded():
    items = list("abcdefgh")
    p1, p2 = RandomPicker(3), RandomPicker(3)
    assert [p1.pick(items) for _ in range(10)] == [p2.pick(items) for _ in range(10)]


@pytest.mark.parametrize("picker", [FirstPicker(), RandomPicker(0)])
def test_empty_sequence_raises(picker):
    with pytest.raises(ValueError):
        picker.pick([])


def test_default_picker_uses_configured_seed(monkeypatch):
    monkeypatch.setattr(config, "RANDOM_SEED", 42)
    items = list(range(100))
    assert [default_picker().pick(items) for _ in range(3)] == [RandomPicker(42).pick(items)] * 3
