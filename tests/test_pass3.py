"""
JSON_checker pass3 document: nested objects.

Validates key order through parse and both output layouts.
"""

import jsoncodec

# from https://json.org/JSON_checker/test/pass3.json
JSON = r"""
{
    "JSON Test Pattern pass3": {
        "The outermost value": "must be an object or array.",
        "In this test": "It is an object."
    }
}
"""


def test_parse() -> None:
    """
    Validates the nested object and its member order.
    """
    res = jsoncodec.parse(JSON)
    inner = res["JSON Test Pattern pass3"]  # type: ignore[index]
    assert list(inner) == ["The outermost value", "In this test"]


def test_reindent_reproduces_document() -> None:
    """
    Validates that four-space output reproduces the original layout.
    """
    res = jsoncodec.parse(JSON)
    assert jsoncodec.stringify(res, space=4) == JSON.strip()


def test_compact_output() -> None:
    """
    Validates the compact single-line form of the same document.
    """
    res = jsoncodec.parse(JSON)
    assert jsoncodec.stringify(res) == (
        '{"JSON Test Pattern pass3":{'
        '"The outermost value":"must be an object or array.",'
        '"In this test":"It is an object."}}'
    )
