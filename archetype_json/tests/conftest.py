from pathlib import Path

import pytest

TEST_DATA_DIR = Path(__file__).parent / "test_data"


def diff_json(left, right, path="$"):
    """Compare two JSON values.

    Objects are compared without regard to key order, arrays element by
    element.

    Returns:
        A list of differences, empty when the values are equal
    """
    if isinstance(left, dict) and isinstance(right, dict):
        diffs = []
        for key in sorted(set(left) | set(right)):
            if key not in left:
                diffs.append(f"{path}.{key}: missing on the left")
            elif key not in right:
                diffs.append(f"{path}.{key}: missing on the right")
            else:
                diffs.extend(diff_json(left[key], right[key], f"{path}.{key}"))
        return diffs
    if isinstance(left, list) and isinstance(right, list):
        if len(left) != len(right):
            return [f"{path}: {len(left)} items != {len(right)} items"]
        diffs = []
        for i, (a, b) in enumerate(zip(left, right)):
            diffs.extend(diff_json(a, b, f"{path}[{i}]"))
        return diffs
    if type(left) is not type(right) or left != right:
        return [f"{path}: {left!r} != {right!r}"]
    return []


@pytest.fixture
def json_diff():
    return diff_json


@pytest.fixture
def test_data_dir():
    return TEST_DATA_DIR


@pytest.fixture
def load_document(test_data_dir):
    def load(name):
        return (test_data_dir / name).read_text(encoding="utf-8")

    return load


@pytest.fixture(params=sorted(path.name for path in TEST_DATA_DIR.glob("*.json")))
def document_name(request):
    """Name of each JSON document in the test_data directory."""
    return request.param
