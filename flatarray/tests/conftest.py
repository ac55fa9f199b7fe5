import pytest
from hypothesis import settings

# Functionally disable deadline settings for tests
# to prevent spurious test failures in CI builds.
settings.register_profile("no_deadlines", deadline=2 * 60 * 1000)  # in ms
settings.load_profile("no_deadlines")


@pytest.fixture
def label_rows():
    return [
        ["O", "O", "O", "B-MISC", "I-MISC", "I-MISC", "O"],
        ["B-PER", "I-PER", "O"],
    ]


@pytest.fixture
def sentence_rows():
    return [
        ["this", "is", "the", "first", "sentence"],
        ["this", "is", "the", "second", "sentence"],
        ["this", "is", "the", "third", "sentence"],
    ]
