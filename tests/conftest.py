import sys
from dataclasses import dataclass
from pathlib import Path

import pytest

# Add the project root to sys.path so hypermedia imports without installing
ROOT_PATH = Path(__file__).resolve().parent.parent
if ROOT_PATH.as_posix() not in sys.path:
    sys.path.insert(0, ROOT_PATH.as_posix())


@dataclass(frozen=True)
class Person:
    first_name: str
    last_name: str


@dataclass(frozen=True)
class Order:
    number: int


@pytest.fixture
def person():
    """Return a sample payload object."""
    return Person(first_name="Dave", last_name="Matthews")


@pytest.fixture
def people():
    return [Person("Dave", "Matthews"), Person("Carter", "Beauford")]


@pytest.fixture
def rfc_values():
    """Variable values from RFC 6570, section 3.2."""
    return {
        "count": ["one", "two", "three"],
        "dom": ["example", "com"],
        "dub": "me/too",
        "hello": "Hello World!",
        "half": "50%",
        "var": "value",
        "who": "fred",
        "base": "http://example.com/home/",
        "path": "/foo/bar",
        "list": ["red", "green", "blue"],
        "keys": {"semi": ";", "dot": ".", "comma": ","},
        "v": "6",
        "x": "1024",
        "y": "768",
        "empty": "",
        "empty_keys": {},
        "undef": None,
    }
