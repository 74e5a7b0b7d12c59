import pytest

from errata.core.catalog import ErrorCatalog
from errata.core.catalog import install_catalog

CLASSES = {
    "DIVIDE_BY_ZERO": {
        "message": ["cannot divide {0} by zero"],
        "sqlState": "22012",
    },
    "STATELESS": {
        "message": ["{0} has no SQL state"],
    },
    "TWO_PARAMETERS": {
        "message": ["{0} fought {1}"],
        "sqlState": "42000",
    },
    "NAMED_PARAMETERS": {
        "message": ["cannot find table {table} in schema {schema}"],
        "sqlState": "42P01",
    },
    "NO_PARAMETERS": {
        "message": ["something went wrong"],
        "sqlState": "XX000",
    },
    "MULTI_LINE": {
        "message": ["first line", "second line for {0}"],
    },
    "UNSUPPORTED_FEATURE": {
        "message": ["The feature is not supported:"],
        "sqlState": "0A000",
        "subClass": {
            "JOIN": {"message": ["{0} join."]},
            "CHARSET": {"message": ["charset {charset}."]},
        },
    },
}


@pytest.fixture
def catalog():
    return ErrorCatalog.from_mapping(CLASSES)


@pytest.fixture(autouse=True)
def installed(catalog):
    previous = install_catalog(catalog)
    yield catalog
    install_catalog(previous)
